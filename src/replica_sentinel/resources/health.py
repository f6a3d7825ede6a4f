"""Health resource — protocol-agnostic health check logic."""

from __future__ import annotations

from replica_sentinel.services.scheduler import Scheduler


class HealthResource:
    """Health check operations."""

    def __init__(self, scheduler: Scheduler) -> None:
        self._scheduler = scheduler

    def check(self) -> dict[str, str]:
        """Return current server health and whether the probe loop runs."""
        return {
            "status": "ok",
            "scheduler": "running" if self._scheduler.running else "stopped",
        }
