"""Group store contract — the cluster's group/term context."""

from __future__ import annotations

from abc import ABC, abstractmethod


class GroupStore(ABC):
    """Read-only view of which groups exist and their current term."""

    @abstractmethod
    def term_of(self, group_id: int) -> int | None:
        """Return the group's term id, or None if the group is unknown."""
