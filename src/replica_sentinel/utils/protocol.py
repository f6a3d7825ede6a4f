"""PKPING wire codec — multi-bulk request encoding and reply framing."""

from __future__ import annotations

HEARTBEAT_COMMAND = b"PKPING"
_CRLF = b"\r\n"


class ProtocolCodec:
    """Static helpers for the heartbeat wire format."""

    @staticmethod
    def _bulk(value: bytes) -> bytes:
        """Frame one argument as ``$<len>\\r\\n<value>\\r\\n``."""
        return b"$" + str(len(value)).encode() + _CRLF + value + _CRLF

    @staticmethod
    def encode(group_id: int, term_id: int, payload: str | bytes = b"") -> bytes:
        """Build the 4-element PKPING request.

        Args:
            group_id: Group the node belongs to, sent as ASCII decimal.
            term_id: Current term of that group, sent as ASCII decimal.
            payload: Opaque message. Strings are sent as UTF-8.
        """
        if isinstance(payload, str):
            payload = payload.encode()
        parts = [
            HEARTBEAT_COMMAND,
            str(group_id).encode(),
            str(term_id).encode(),
            payload,
        ]
        return b"*4" + _CRLF + b"".join(ProtocolCodec._bulk(part) for part in parts)

    @staticmethod
    def _frame_end(buffer: bytes) -> int | None:
        """Return the index just past the leading frame, or None if incomplete.

        Arrays are walked with a count of elements still owed, so nesting
        depth costs no stack.
        """
        position = 0
        owed = 1
        while owed:
            line_end = buffer.find(_CRLF, position)
            if line_end < 0:
                return None
            prefix = buffer[position:position + 1]
            header = buffer[position + 1:line_end]
            position = line_end + len(_CRLF)
            owed -= 1
            if prefix in (b"+", b"-", b":"):
                continue
            if prefix not in (b"$", b"*"):
                return None
            try:
                count = int(header)
            except ValueError:
                return None
            if count < 0:
                continue
            if prefix == b"*":
                owed += count
                continue
            position += count + len(_CRLF)
            if len(buffer) < position:
                return None
        return position

    @staticmethod
    def is_complete(buffer: bytes) -> bool:
        """True once ``buffer`` holds one whole framed reply.

        Unframed text (a bare status dump) is never complete; the reader
        keeps going until EOF, timeout or capacity.
        """
        return ProtocolCodec._frame_end(buffer) is not None

    @staticmethod
    def is_acknowledged(reply: bytes) -> bool:
        """True if the node answered the ping with ``+PONG``."""
        return b"+PONG" in reply
