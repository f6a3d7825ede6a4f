"""Monitoring target model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class MonitoredNode:
    """One node of the cluster, probed once per cycle.

    Immutable once registered. Only ``NodeRegistry.add_host`` creates them.
    """

    host: str
    port: int
    group_id: int
    term_id: int

    @property
    def address(self) -> str:
        """``host:port`` label used in logs and errors."""
        return f"{self.host}:{self.port}"

    def to_dict(self) -> dict[str, str | int]:
        """Serialize to a JSON-safe dict."""
        return {
            "host": self.host,
            "port": self.port,
            "group_id": self.group_id,
            "term_id": self.term_id,
        }
