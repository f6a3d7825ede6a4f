"""TCP sink — writes messages to a controller over one long-lived socket."""

from __future__ import annotations

import socket

from replica_sentinel.plugins.contracts.sink import Sink


class TcpSink(Sink):
    """Keeps one connection open and redials lazily after a failure.

    Messages go out as-is; the consumer sees the raw byte stream.
    """

    def __init__(self, host: str, port: int, *, timeout: float = 3.0) -> None:
        self._host = host
        self._port = port
        self._timeout = timeout
        self._sock: socket.socket | None = None

    def send(self, message: bytes) -> None:
        if self._sock is None:
            self._sock = socket.create_connection(
                (self._host, self._port), timeout=self._timeout,
            )
        try:
            self._sock.sendall(message)
        except OSError:
            self.close()
            raise

    def close(self) -> None:
        if self._sock is not None:
            self._sock.close()
            self._sock = None
