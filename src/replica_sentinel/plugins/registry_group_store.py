"""Group store backed by the node registry."""

from __future__ import annotations

from replica_sentinel.plugins.contracts.group_store import GroupStore
from replica_sentinel.services.node_registry import NodeRegistry


class RegistryGroupStore(GroupStore):
    """Groups are the ones registered nodes belong to.

    When several nodes of a group carry different terms, the most
    recently registered node wins.
    """

    def __init__(self, registry: NodeRegistry) -> None:
        self._registry = registry

    def term_of(self, group_id: int) -> int | None:
        term: int | None = None
        for node in self._registry:
            if node.group_id == group_id:
                term = node.term_id
        return term
