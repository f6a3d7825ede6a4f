"""Node resource — registration and listing of monitoring targets."""

from __future__ import annotations

from replica_sentinel.services.node_registry import NodeRegistry


class InvalidNodeError(Exception):
    """Raised when a registration body is missing fields or has wrong types."""


class NodeResource:
    """Thin wrapper over the registry for the HTTP layer."""

    _INT_FIELDS = ("port", "group_id", "term_id")

    def __init__(self, registry: NodeRegistry) -> None:
        self._registry = registry

    def list_nodes(self) -> list[dict[str, str | int]]:
        """Return every registered node in registration order."""
        return [node.to_dict() for node in self._registry]

    def add_node(self, data: dict[str, object]) -> dict[str, str | int]:
        """Register a node from a request body.

        Raises:
            InvalidNodeError: If host is empty or a numeric field is not an int.
        """
        host = data.get("host")
        if not isinstance(host, str) or not host.strip():
            raise InvalidNodeError("host is required")
        values: dict[str, int] = {}
        for name in self._INT_FIELDS:
            value = data.get(name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidNodeError(f"{name} must be an integer")
            values[name] = value
        node = self._registry.add_host(
            host.strip(), values["port"], values["group_id"], values["term_id"],
        )
        return node.to_dict()
