"""Sink contract — the downstream consumer of probe results."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Sink(ABC):
    """Receives opaque messages from the publisher.

    Implementations add no framing of their own and raise ``OSError``
    when a message cannot be delivered.
    """

    @abstractmethod
    def send(self, message: bytes) -> None:
        """Deliver one message."""

    def close(self) -> None:
        """Release any held connection. Default: nothing to release."""
