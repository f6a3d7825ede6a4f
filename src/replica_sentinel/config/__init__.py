"""Configuration package — re-exports for convenience."""

from replica_sentinel.config.loader import ConfigLoader
from replica_sentinel.config.settings import NodeSettings, Settings

__all__ = ["ConfigLoader", "NodeSettings", "Settings"]
