"""Ordered registry of monitoring targets."""

from __future__ import annotations

import threading
from collections.abc import Iterator

from replica_sentinel.models.node import MonitoredNode


class NodeRegistry:
    """Append-only, ordered set of nodes to probe.

    No deduplication and no validation. Iteration yields a snapshot, so
    a registration during a running cycle is picked up by the next one.
    """

    def __init__(self) -> None:
        self._nodes: list[MonitoredNode] = []
        self._lock = threading.Lock()

    def add_host(
        self, host: str, port: int, group_id: int, term_id: int,
    ) -> MonitoredNode:
        """Register a node and return it."""
        node = MonitoredNode(host=host, port=port, group_id=group_id, term_id=term_id)
        with self._lock:
            self._nodes.append(node)
        return node

    def snapshot(self) -> tuple[MonitoredNode, ...]:
        """Return the nodes in registration order."""
        with self._lock:
            return tuple(self._nodes)

    def __iter__(self) -> Iterator[MonitoredNode]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)
