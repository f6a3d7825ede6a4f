"""Tests for the background probe loop."""

from __future__ import annotations

import json
import logging
import threading

import pytest

from replica_sentinel.clients.prober import Prober
from replica_sentinel.plugins.memory_transport import MemoryTransport
from replica_sentinel.services.node_registry import NodeRegistry
from replica_sentinel.services.publisher import Publisher
from replica_sentinel.services.scheduler import Scheduler
from tests.conftest import RecordingSink


def _scheduler(
    registry: NodeRegistry,
    transport: MemoryTransport,
    sink: RecordingSink,
    cycle_delay: float = 0.05,
) -> Scheduler:
    return Scheduler(
        registry=registry,
        prober=Prober(transport),
        publisher=Publisher(),
        sink=sink,
        node_delay=0.0,
        cycle_delay=cycle_delay,
    )


def _three_nodes() -> NodeRegistry:
    registry = NodeRegistry()
    registry.add_host("node1", 9221, 1, 1)
    registry.add_host("node2", 9221, 1, 1)
    registry.add_host("node3", 9221, 1, 1)
    return registry


def test_failed_node_is_isolated(caplog: pytest.LogCaptureFixture) -> None:
    """Node 2 refuses; nodes 1 and 3 still publish, one error is logged."""
    transport = MemoryTransport()
    transport.script("node1", 9221, b"role:master\r\n")
    transport.script("node3", 9221, b"role:slave\r\n")
    sink = RecordingSink()
    scheduler = _scheduler(_three_nodes(), transport, sink)

    with caplog.at_level(logging.ERROR):
        published = scheduler.run_cycle()

    assert published == 2
    assert sink.messages[0] == b"role:master\r\n"
    assert json.loads(sink.messages[1])["role"] == "master"
    assert sink.messages[2] == b"role:slave\r\n"
    assert json.loads(sink.messages[3])["role"] == "slave"
    errors = [record for record in caplog.records if record.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "node2:9221" in errors[0].getMessage()


def test_publish_failure_is_isolated() -> None:
    transport = MemoryTransport()
    for host in ("node1", "node2", "node3"):
        transport.script(host, 9221, f"role:{host}\r\n".encode())
    sink = RecordingSink(fail_on=b"node2")
    scheduler = _scheduler(_three_nodes(), transport, sink)
    assert scheduler.run_cycle() == 2
    assert sink.messages[0] == b"role:node1\r\n"
    assert sink.messages[2] == b"role:node3\r\n"


def test_unexpected_error_is_logged_and_skipped(caplog: pytest.LogCaptureFixture) -> None:
    def explode(host: str, port: int) -> None:
        if host == "node1":
            raise RuntimeError("boom")

    transport = MemoryTransport(on_connect=explode)
    transport.script("node2", 9221, b"role:master\r\n")
    transport.script("node3", 9221, b"role:master\r\n")
    scheduler = _scheduler(_three_nodes(), transport, RecordingSink())
    with caplog.at_level(logging.ERROR):
        assert scheduler.run_cycle() == 2
    assert any("node1:9221" in record.getMessage() for record in caplog.records)


def test_start_is_idempotent() -> None:
    scheduler = _scheduler(NodeRegistry(), MemoryTransport(), RecordingSink())
    assert scheduler.start() is True
    try:
        assert scheduler.start() is False
        assert scheduler.running
    finally:
        scheduler.stop()
    assert not scheduler.running


def test_stop_when_stopped_is_noop() -> None:
    scheduler = _scheduler(NodeRegistry(), MemoryTransport(), RecordingSink())
    scheduler.stop()
    assert not scheduler.running


def test_restart_after_stop() -> None:
    scheduler = _scheduler(NodeRegistry(), MemoryTransport(), RecordingSink())
    scheduler.start()
    scheduler.stop()
    assert scheduler.start() is True
    scheduler.stop()
    assert not scheduler.running


def test_loop_repeats_cycles() -> None:
    probes: list[str] = []
    second_cycle = threading.Event()

    def count(host: str, port: int) -> None:
        probes.append(host)
        if len(probes) >= 2:
            second_cycle.set()

    transport = MemoryTransport(on_connect=count)
    transport.script("node1", 9221, b"role:master\r\n")
    registry = NodeRegistry()
    registry.add_host("node1", 9221, 1, 1)
    sink = RecordingSink()
    scheduler = _scheduler(registry, transport, sink, cycle_delay=0.01)

    scheduler.start()
    try:
        assert second_cycle.wait(5)
    finally:
        scheduler.stop()
    assert len(sink.messages) >= 4


def test_stop_waits_for_inflight_node() -> None:
    """Stop blocks until node1 finishes; node2 is never started."""
    entered = threading.Event()
    release = threading.Event()
    dialed: list[str] = []

    def gate(host: str, port: int) -> None:
        dialed.append(host)
        if host == "node1":
            entered.set()
            release.wait(5)

    transport = MemoryTransport(on_connect=gate)
    transport.script("node1", 9221, b"role:master\r\n")
    transport.script("node2", 9221, b"role:master\r\n")
    registry = NodeRegistry()
    registry.add_host("node1", 9221, 1, 1)
    registry.add_host("node2", 9221, 1, 1)
    sink = RecordingSink()
    scheduler = _scheduler(registry, transport, sink)

    scheduler.start()
    assert entered.wait(5)
    stopper = threading.Thread(target=scheduler.stop)
    stopper.start()
    stopper.join(0.2)
    assert stopper.is_alive()

    release.set()
    stopper.join(5)
    assert not stopper.is_alive()
    assert not scheduler.running
    assert dialed == ["node1"]
    assert sink.messages[0] == b"role:master\r\n"
    assert len(sink.messages) == 2


def test_publish_failure_logged_with_node(caplog: pytest.LogCaptureFixture) -> None:
    transport = MemoryTransport()
    for host in ("node1", "node2", "node3"):
        transport.script(host, 9221, f"role:{host}\r\n".encode())
    scheduler = _scheduler(_three_nodes(), transport, RecordingSink(fail_on=b"node2"))
    with caplog.at_level(logging.ERROR):
        scheduler.run_cycle()
    messages = [record.getMessage() for record in caplog.records if record.levelno >= logging.ERROR]
    assert len(messages) == 1
    assert "node2:9221: sink rejected raw reply" in messages[0]
