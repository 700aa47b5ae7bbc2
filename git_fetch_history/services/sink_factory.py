"""Factory for creating record sinks."""

import logging

from ..config.settings import Settings
from ..exceptions import ConfigurationError
from ..protocols.sink_protocol import SinkProtocol
from .sinks import LocalDirectorySink, S3Sink

logger = logging.getLogger(__name__)


def create_sink(
    backend: str,
    bucket: str = "",
    region: str = "",
    local_path: str = "",
) -> SinkProtocol:
    """
    Create a sink for the given backend.

    Args:
        backend: "s3" or "local"
        bucket: S3 bucket name (s3 backend)
        region: AWS region (s3 backend)
        local_path: Root directory (local backend)

    Returns:
        SinkProtocol implementation
    """
    if backend == "s3":
        logger.info("Publishing records to s3://%s (%s)", bucket, region)
        return S3Sink(bucket=bucket, region=region)
    if backend == "local":
        logger.info("Publishing records to local directory %s", local_path)
        return LocalDirectorySink(local_path)
    raise ConfigurationError(f"Unknown sink backend: {backend}")


def create_sink_from_settings(settings: Settings) -> SinkProtocol:
    return create_sink(
        backend=settings.SINK_BACKEND,
        bucket=settings.AWS_BUCKET,
        region=settings.AWS_REGION,
        local_path=settings.LOCAL_SINK_PATH,
    )
