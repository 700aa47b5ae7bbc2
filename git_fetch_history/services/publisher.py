import logging

from ..exceptions import PublishError
from ..protocols.sink_protocol import SinkProtocol
from ..schemas import CommitRecord

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"


def record_key(record: CommitRecord) -> str:
    return f"{record.repo}/{record.branch}/{record.hash}.json"


def serialize_record(record: CommitRecord) -> bytes:
    """Canonical JSON for a record: wire key names, fixed order, no spaces."""
    return record.model_dump_json(by_alias=True).encode("utf-8")


class Publisher:
    """Writes commit records to a sink, overwriting any previous copy."""

    def __init__(self, sink: SinkProtocol):
        self.sink = sink

    def publish(self, record: CommitRecord) -> str:
        key = record_key(record)
        body = serialize_record(record)
        logger.info("Uploading %s", key)
        try:
            self.sink.put(key, body, CONTENT_TYPE)
        except PublishError:
            raise
        except Exception as e:
            raise PublishError(f"Failed to publish {key}: {e}") from e
        return key
