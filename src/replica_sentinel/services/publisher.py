"""Publisher — hands raw and structured status to the downstream sink."""

from __future__ import annotations

import json

from replica_sentinel.errors import PublishError
from replica_sentinel.models.node import MonitoredNode
from replica_sentinel.models.replication import ReplicationStatus
from replica_sentinel.plugins.contracts.sink import Sink


class Publisher:
    """Writes two messages per node: the raw reply, then the JSON status."""

    @staticmethod
    def serialize(status: ReplicationStatus) -> bytes:
        """Encode the status document as UTF-8 JSON."""
        return json.dumps(status.to_dict()).encode()

    def publish(
        self,
        sink: Sink,
        raw_reply: bytes,
        status: ReplicationStatus,
        *,
        node: MonitoredNode | None = None,
    ) -> None:
        """Send both messages in order. No retry.

        ``node`` only labels the error raised on failure.

        Raises:
            PublishError: If the sink fails on either message. The JSON
                message is not attempted when the raw one fails.
        """
        document = self.serialize(status)
        for label, message in (("raw reply", raw_reply), ("status", document)):
            try:
                sink.send(message)
            except OSError as error:
                prefix = f"{node.address}: " if node is not None else ""
                raise PublishError(
                    f"{prefix}sink rejected {label}: {error}", node=node,
                ) from error
