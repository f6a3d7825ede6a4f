"""Prober — one PKPING request/reply exchange per call."""

from __future__ import annotations

import logging
import time

from replica_sentinel.errors import NodeConnectionError, ReadTruncationWarning
from replica_sentinel.models.node import MonitoredNode
from replica_sentinel.plugins.contracts.transport import Connection, Transport
from replica_sentinel.utils.protocol import ProtocolCodec

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 4096


class Prober:
    """Dials a node, sends PKPING, reads the reply, hangs up.

    A fresh connection is opened for every probe and always closed
    afterwards. There is no retry; the next cycle is the retry.
    ``reply_timeout`` bounds the whole read, however the node paces it.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        max_reply_bytes: int = 65536,
        strict_reply_size: bool = False,
        reply_timeout: float = 3.0,
    ) -> None:
        self._transport = transport
        self._max_reply_bytes = max_reply_bytes
        self._strict_reply_size = strict_reply_size
        self._reply_timeout = reply_timeout

    def probe(self, node: MonitoredNode, payload: str | bytes = b"") -> bytes:
        """Run one exchange and return the raw reply.

        Raises:
            NodeConnectionError: If the node cannot be dialed or written
                to, or sends nothing before the reply timeout.
            ReadTruncationWarning: Only in strict mode, when the reply
                exceeds ``max_reply_bytes``.
        """
        command = ProtocolCodec.encode(node.group_id, node.term_id, payload)
        try:
            connection = self._transport.connect(node.host, node.port)
        except OSError as error:
            raise NodeConnectionError(node, f"connect failed: {error}") from error
        try:
            try:
                connection.send(command)
            except OSError as error:
                raise NodeConnectionError(node, f"send failed: {error}") from error
            reply = self._read_reply(node, connection)
        finally:
            connection.close()

        if ProtocolCodec.is_acknowledged(reply):
            logger.debug("PKPING to %s succeeded", node.address)
        else:
            logger.info("PKPING to %s was not acknowledged", node.address)
        return reply

    def _receive(
        self, node: MonitoredNode, connection: Connection, want: int, deadline: float,
    ) -> bytes | None:
        """One bounded read. None means the reply budget ran out."""
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return None
        connection.set_timeout(remaining)
        try:
            return connection.receive(want)
        except TimeoutError:
            return None
        except OSError as error:
            raise NodeConnectionError(node, f"read failed: {error}") from error

    def _read_reply(self, node: MonitoredNode, connection: Connection) -> bytes:
        """Read until a full frame, EOF, the reply deadline, or capacity."""
        deadline = time.monotonic() + self._reply_timeout
        buffer = bytearray()
        while len(buffer) < self._max_reply_bytes:
            want = min(_CHUNK_SIZE, self._max_reply_bytes - len(buffer))
            chunk = self._receive(node, connection, want, deadline)
            if chunk is None:
                if not buffer:
                    raise NodeConnectionError(node, "no reply before timeout")
                logger.debug("Read from %s timed out after %d bytes", node.address, len(buffer))
                return bytes(buffer)
            if not chunk:
                return bytes(buffer)
            buffer.extend(chunk)
            if ProtocolCodec.is_complete(bytes(buffer)):
                return bytes(buffer)

        # Exactly full: only more data means the reply was cut.
        if not self._receive(node, connection, 1, deadline):
            return bytes(buffer)
        warning = ReadTruncationWarning(
            f"reply from {node.address} exceeded {self._max_reply_bytes} bytes, truncated",
        )
        if self._strict_reply_size:
            raise warning
        logger.warning("%s", warning)
        return bytes(buffer)
