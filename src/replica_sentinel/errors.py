"""Error taxonomy shared by the probe, parse and publish pipeline."""

from __future__ import annotations

from replica_sentinel.models.node import MonitoredNode


class SentinelError(Exception):
    """Base class for every error raised by the pipeline."""


class NodeConnectionError(SentinelError, ConnectionError):
    """Raised when a node cannot be dialed, written to, or never replies."""

    def __init__(self, node: MonitoredNode, reason: str) -> None:
        super().__init__(f"{node.address}: {reason}")
        self.node = node
        self.reason = reason


class ReadTruncationWarning(SentinelError, UserWarning):
    """A reply exceeded the read capacity and was cut short.

    Logged by default. Raised when strict reply sizing is enabled.
    """


class ParseWarning(SentinelError, UserWarning):
    """A malformed slave or db record. Only that record is dropped."""


class PublishError(SentinelError):
    """Raised when the sink rejects either of the two messages."""

    def __init__(self, message: str, node: MonitoredNode | None = None) -> None:
        super().__init__(message)
        self.node = node


class UploadError(SentinelError):
    """Raised when an artifact cannot be stored."""
