"""Node controller — thin HTTP adapter for NodeResource."""

from __future__ import annotations

from litestar import Controller, get, post
from litestar.exceptions import HTTPException

from replica_sentinel.resources.node import InvalidNodeError, NodeResource


class NodeController(Controller):
    """List and register monitoring targets."""

    path = "/api/nodes"

    @get("/")
    async def list_nodes(self, node_resource: NodeResource) -> list[dict[str, str | int]]:
        """Return all registered nodes in probe order."""
        return node_resource.list_nodes()

    @post("/", status_code=201)
    async def add_node(
        self, data: dict[str, object], node_resource: NodeResource,
    ) -> dict[str, str | int]:
        """Register a node.

        Body: {"host": "...", "port": 9221, "group_id": 1, "term_id": 1}
        """
        try:
            return node_resource.add_node(data)
        except InvalidNodeError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
