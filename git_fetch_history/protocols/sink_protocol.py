"""Record sink protocol interface."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class SinkProtocol(Protocol):
    """Durable key/value storage for published records."""

    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Write body under key, replacing whatever is stored there."""
        ...
