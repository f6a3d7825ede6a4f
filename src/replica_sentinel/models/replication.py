"""Structured replication status decoded from a node's status text."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SlaveDescriptor:
    """One replica as seen by the probed node."""

    ip: str
    port: int
    state: int
    offset: int

    def to_dict(self) -> dict[str, str | int]:
        """Serialize with the numeric fields kept as integers."""
        return {
            "ip": self.ip,
            "port": self.port,
            "state": self.state,
            "offset": self.offset,
        }


@dataclass
class ReplicationStatus:
    """Flat info map plus the ordered slave list.

    Built fresh for every probe and dropped once published.
    """

    info: dict[str, str] = field(default_factory=dict)
    slaves: list[SlaveDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """JSON document: info fields at top level plus a ``slaves`` array.

        ``slaves`` is always present and replaces an info key of that name.
        """
        document: dict[str, object] = dict(self.info)
        document["slaves"] = [slave.to_dict() for slave in self.slaves]
        return document
