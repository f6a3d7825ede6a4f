"""Shared fixtures for replica_sentinel tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from litestar.testing import TestClient

from replica_sentinel.app import create_app
from replica_sentinel.config import NodeSettings, Settings
from replica_sentinel.errors import UploadError
from replica_sentinel.plugins.contracts.sink import Sink
from replica_sentinel.plugins.contracts.uploader import ArtifactUploader
from replica_sentinel.plugins.memory_transport import MemoryTransport

MASTER_INFO = (
    b"# Replication(MASTER)\r\n"
    b"role:master\r\n"
    b"connected_slaves:1\r\n"
    b"slave0:ip=10.0.0.2,port=9221,state=1,offset=4096\r\n"
    b"db0:binlog_offset=00000003 1024,safety_purge=none\r\n"
)


class RecordingSink(Sink):
    """Keeps every message; raises OSError for messages containing ``fail_on``."""

    def __init__(self, fail_on: bytes | None = None) -> None:
        self.messages: list[bytes] = []
        self.closed = False
        self._fail_on = fail_on

    def send(self, message: bytes) -> None:
        if self._fail_on is not None and self._fail_on in message:
            raise OSError("sink unavailable")
        self.messages.append(message)

    def close(self) -> None:
        self.closed = True


class RecordingUploader(ArtifactUploader):
    """Records uploads instead of talking to object storage."""

    def __init__(self, fail: bool = False) -> None:
        self.calls: list[tuple[str, str, bytes]] = []
        self._fail = fail

    def upload_artifact(self, bucket: str, key: str, content: bytes) -> None:
        if self._fail:
            raise UploadError(f"Unable to upload [{key}] to [{bucket}]")
        self.calls.append((bucket, key, content))


@pytest.fixture()
def settings() -> Settings:
    """Test settings: no background loop, no delays, one group-1 node."""
    return Settings(
        nodes=[NodeSettings(host="10.0.0.1", port=9221, group_id=1, term_id=3)],
        scheduler_enabled=False,
        node_delay_seconds=0.0,
        cycle_delay_seconds=0.05,
    )


@pytest.fixture()
def transport() -> MemoryTransport:
    """In-memory transport with the configured node answering MASTER_INFO."""
    memory = MemoryTransport()
    memory.script("10.0.0.1", 9221, MASTER_INFO)
    return memory


@pytest.fixture()
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def uploader() -> RecordingUploader:
    return RecordingUploader()


@pytest.fixture()
def client(
    settings: Settings,
    transport: MemoryTransport,
    sink: RecordingSink,
    uploader: RecordingUploader,
) -> Iterator[TestClient]:  # type: ignore[type-arg]
    """Litestar test client with lifespan managed and fakes injected."""
    app = create_app(settings, transport=transport, sink=sink, uploader=uploader)
    with TestClient(app=app) as test_client:
        yield test_client
