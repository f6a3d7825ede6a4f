"""Decode a node's replication status text into a ReplicationStatus.

The text is line oriented (``key:value``). Two key families carry nested
``subkey=subvalue,...`` records:

* ``slave<N>`` lines describe one replica each. Subkeys ``ip``, ``port``,
  ``state`` and ``offset`` are required; a replica missing any of them, or
  with a non-integer numeric field, is dropped.
* ``db<N>`` lines only contribute ``binlog_offset``, whose value
  ``"<file_num> <offset>"`` becomes ``binlog_file_num`` and
  ``binlog_offset`` in the info map.

The positional ``slave0:ip,port,state,offset`` layout is not supported.
"""

from __future__ import annotations

import logging
import re

from replica_sentinel.errors import ParseWarning
from replica_sentinel.models.replication import ReplicationStatus, SlaveDescriptor

logger = logging.getLogger(__name__)

_SLAVE_KEY = re.compile(r"slave\d+")
_DB_KEY = re.compile(r"db\d+")
_SLAVE_FIELDS = ("ip", "port", "state", "offset")


class StatusParser:
    """Stateless parser. ``parse`` may be called from any thread."""

    @staticmethod
    def _pairs(record: str, key: str) -> list[tuple[str, str]]:
        """Split ``a=1,b=2`` into pairs, skipping entries without ``=``."""
        pairs: list[tuple[str, str]] = []
        for item in record.split(","):
            name, sep, value = item.partition("=")
            if not sep:
                logger.warning(
                    "Invalid replication info, %s = %r, entry = %r",
                    key, record, item,
                )
                continue
            pairs.append((name.strip(), value))
        return pairs

    @staticmethod
    def _build_slave(key: str, fields: dict[str, str]) -> SlaveDescriptor:
        """Build one descriptor or raise ParseWarning; never partially filled."""
        missing = [name for name in _SLAVE_FIELDS if name not in fields]
        if missing:
            raise ParseWarning(f"{key} is missing {', '.join(missing)}")
        try:
            return SlaveDescriptor(
                ip=fields["ip"],
                port=int(fields["port"]),
                state=int(fields["state"]),
                offset=int(fields["offset"]),
            )
        except ValueError as error:
            raise ParseWarning(f"{key} has a non-integer field: {error}") from error

    @staticmethod
    def _apply_db(key: str, record: str, info: dict[str, str]) -> None:
        for name, value in StatusParser._pairs(record, key):
            if name != "binlog_offset":
                continue
            file_num, sep, offset = value.partition(" ")
            if not sep:
                logger.warning("Dropping %s binlog_offset %r: expected '<file> <offset>'", key, value)
                continue
            info["binlog_file_num"] = file_num
            info["binlog_offset"] = offset

    @staticmethod
    def parse(text: str | bytes) -> ReplicationStatus:
        """Parse a raw status reply.

        Malformed slave records are logged and dropped; everything else in
        the text is still returned.
        """
        if isinstance(text, bytes):
            text = text.decode("utf-8", errors="replace")
        info: dict[str, str] = {}
        slave_groups: dict[str, dict[str, str]] = {}

        for raw_line in text.split("\n"):
            line = raw_line.rstrip("\r")
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition(":")
            if not sep:
                continue
            key = key.strip()
            if _SLAVE_KEY.fullmatch(key):
                slave_groups.setdefault(key, {}).update(StatusParser._pairs(value, key))
            elif _DB_KEY.fullmatch(key):
                StatusParser._apply_db(key, value, info)
            else:
                info[key] = value

        slaves: list[SlaveDescriptor] = []
        for key, fields in slave_groups.items():
            try:
                slaves.append(StatusParser._build_slave(key, fields))
            except ParseWarning as warning:
                logger.warning("Dropping slave entry: %s", warning)
        return ReplicationStatus(info=info, slaves=slaves)
