"""TCP transport — real sockets with connect and read timeouts."""

from __future__ import annotations

import socket

from replica_sentinel.plugins.contracts.transport import Connection, Transport


class TcpConnection(Connection):
    """Blocking socket wrapper. Timeouts surface as ``TimeoutError``."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def send(self, data: bytes) -> None:
        self._sock.sendall(data)

    def receive(self, max_bytes: int) -> bytes:
        return self._sock.recv(max_bytes)

    def set_timeout(self, seconds: float) -> None:
        self._sock.settimeout(seconds)

    def close(self) -> None:
        self._sock.close()


class TcpTransport(Transport):
    """Dials nodes over plain TCP. Built once at startup."""

    def __init__(
        self, *, connect_timeout: float = 3.0, read_timeout: float = 3.0,
    ) -> None:
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout

    def connect(self, host: str, port: int) -> Connection:
        """Open a socket; reads time out after ``read_timeout`` until the prober narrows it."""
        sock = socket.create_connection((host, port), timeout=self._connect_timeout)
        sock.settimeout(self._read_timeout)
        return TcpConnection(sock)
