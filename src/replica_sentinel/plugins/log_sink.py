"""Log sink — used when no controller is configured."""

from __future__ import annotations

import logging

from replica_sentinel.plugins.contracts.sink import Sink

logger = logging.getLogger(__name__)


class LogSink(Sink):
    """Writes every message to the log at INFO."""

    def send(self, message: bytes) -> None:
        logger.info("%s", message.decode("utf-8", errors="replace"))
