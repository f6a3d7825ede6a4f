"""Data model — import all models here so callers have a single entry point."""

from replica_sentinel.models.node import MonitoredNode
from replica_sentinel.models.replication import ReplicationStatus, SlaveDescriptor

__all__ = ["MonitoredNode", "ReplicationStatus", "SlaveDescriptor"]
