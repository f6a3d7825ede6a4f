"""In-memory transport — scripted duplex buffers instead of sockets."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from replica_sentinel.plugins.contracts.transport import Connection, Transport


@dataclass
class ScriptedReply:
    """What a fake node does once a request arrives.

    ``chunks`` are handed out one per ``receive`` call, each after
    ``chunk_delay`` seconds. After the last chunk the connection reports
    EOF, or raises ``TimeoutError`` when ``hang`` is set (a node that
    keeps the socket open).
    """

    chunks: list[bytes] = field(default_factory=list)
    hang: bool = False
    fail_send: bool = False
    chunk_delay: float = 0.0


class MemoryConnection(Connection):
    """One side of an in-memory exchange. Records everything sent."""

    def __init__(self, reply: ScriptedReply) -> None:
        self._reply = reply
        self._pending: list[bytes] = []
        self._timeout: float | None = None
        self.sent = bytearray()
        self.closed = False

    def send(self, data: bytes) -> None:
        if self.closed:
            raise OSError("connection closed")
        if self._reply.fail_send:
            raise BrokenPipeError("peer reset the connection")
        self.sent.extend(data)
        self._pending = list(self._reply.chunks)

    def set_timeout(self, seconds: float) -> None:
        self._timeout = seconds

    def receive(self, max_bytes: int) -> bytes:
        if self.closed:
            raise OSError("connection closed")
        if not self._pending:
            if self._reply.hang:
                raise TimeoutError("timed out")
            return b""
        delay = self._reply.chunk_delay
        if delay:
            if self._timeout is not None and self._timeout < delay:
                time.sleep(self._timeout)
                raise TimeoutError("timed out")
            time.sleep(delay)
        chunk = self._pending[0]
        head, rest = chunk[:max_bytes], chunk[max_bytes:]
        if rest:
            self._pending[0] = rest
        else:
            self._pending.pop(0)
        return head

    def close(self) -> None:
        self.closed = True


class MemoryTransport(Transport):
    """Transport over scripted replies keyed by ``(host, port)``.

    Unknown addresses refuse the connection. ``on_connect`` runs before
    every dial, which lets tests block or count probes.
    """

    def __init__(self, on_connect: Callable[[str, int], None] | None = None) -> None:
        self._replies: dict[tuple[str, int], ScriptedReply] = {}
        self._on_connect = on_connect
        self._lock = threading.Lock()
        self.connections: list[MemoryConnection] = []

    def script(
        self, host: str, port: int, *chunks: bytes,
        hang: bool = False, fail_send: bool = False, chunk_delay: float = 0.0,
    ) -> None:
        """Register the reply a node gives to every probe."""
        self._replies[(host, port)] = ScriptedReply(
            chunks=list(chunks), hang=hang, fail_send=fail_send, chunk_delay=chunk_delay,
        )

    def connect(self, host: str, port: int) -> Connection:
        if self._on_connect is not None:
            self._on_connect(host, port)
        reply = self._replies.get((host, port))
        if reply is None:
            raise ConnectionRefusedError(f"connection refused by {host}:{port}")
        connection = MemoryConnection(reply)
        with self._lock:
            self.connections.append(connection)
        return connection
