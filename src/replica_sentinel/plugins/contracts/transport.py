"""Transport contract — how the prober reaches a node."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Connection(ABC):
    """One open duplex byte stream to a node.

    Implementations raise ``OSError`` (``TimeoutError`` for timeouts) on
    failure.
    """

    @abstractmethod
    def send(self, data: bytes) -> None:
        """Write all of ``data``."""

    @abstractmethod
    def receive(self, max_bytes: int) -> bytes:
        """Read up to ``max_bytes``. Returns ``b""`` once the peer closed."""

    @abstractmethod
    def set_timeout(self, seconds: float) -> None:
        """Bound the next ``receive``; it raises ``TimeoutError`` after ``seconds``."""

    @abstractmethod
    def close(self) -> None:
        """Release the connection. Safe to call more than once."""


class Transport(ABC):
    """Opens connections. One connection per probe, never reused."""

    @abstractmethod
    def connect(self, host: str, port: int) -> Connection:
        """Dial ``host:port``.

        Raises:
            OSError: If the node cannot be reached.
        """
