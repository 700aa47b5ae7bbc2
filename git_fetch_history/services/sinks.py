import io
import logging
from pathlib import Path
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import PublishError

logger = logging.getLogger(__name__)


class S3Sink:
    """Writes records to an S3 bucket as private, encrypted objects."""

    def __init__(self, bucket: str, region: str, client: Optional[Any] = None):
        self.bucket = bucket
        self.region = region
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.session.Session(region_name=self.region).client("s3")
        return self._client

    def put(self, key: str, body: bytes, content_type: str) -> None:
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                ACL="private",
                Body=io.BytesIO(body),
                ContentLength=len(body),
                ContentType=content_type,
                ContentDisposition="attachment",
                ServerSideEncryption="AES256",
            )
        except (BotoCoreError, ClientError) as e:
            raise PublishError(f"Failed to upload s3://{self.bucket}/{key}: {e}") from e


class LocalDirectorySink:
    """Writes records below a local directory, for development."""

    def __init__(self, root: str):
        self.root = Path(root)

    def put(self, key: str, body: bytes, content_type: str) -> None:
        target = self.root / key
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(body)
        except OSError as e:
            raise PublishError(f"Failed to write {target}: {e}") from e
        logger.debug("Wrote %d bytes (%s) to %s", len(body), content_type, target)
