"""Scheduler — the background probe → parse → publish loop."""

from __future__ import annotations

import logging
import threading

from replica_sentinel.clients.prober import Prober
from replica_sentinel.errors import SentinelError
from replica_sentinel.models.node import MonitoredNode
from replica_sentinel.plugins.contracts.sink import Sink
from replica_sentinel.services.node_registry import NodeRegistry
from replica_sentinel.services.publisher import Publisher
from replica_sentinel.utils.status_parser import StatusParser

logger = logging.getLogger(__name__)


class Scheduler:
    """Owns the monitoring thread.

    Two states, Stopped and Running. ``start`` while Running is a no-op;
    ``stop`` lets the node step in flight finish, then joins the thread.
    Nodes are probed one at a time in registration order, and a failure
    on one node never aborts the cycle.
    """

    def __init__(
        self,
        *,
        registry: NodeRegistry,
        prober: Prober,
        publisher: Publisher,
        sink: Sink,
        payload: str = "",
        node_delay: float = 1.0,
        cycle_delay: float = 10.0,
    ) -> None:
        self._registry = registry
        self._prober = prober
        self._publisher = publisher
        self._sink = sink
        self._payload = payload
        self._node_delay = node_delay
        self._cycle_delay = cycle_delay
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """True between a successful ``start`` and the matching ``stop``."""
        with self._state_lock:
            return self._thread is not None

    def start(self) -> bool:
        """Launch the loop. Returns False if it was already running."""
        with self._state_lock:
            if self._thread is not None:
                logger.warning("Scheduler already running, start ignored")
                return False
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run, name="replica-sentinel-scheduler", daemon=True,
            )
            self._thread.start()
        logger.info("Scheduler started with %d node(s)", len(self._registry))
        return True

    def stop(self, timeout: float | None = None) -> None:
        """Request cancellation and wait for the loop to exit."""
        with self._state_lock:
            thread = self._thread
            if thread is None:
                return
            self._stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Scheduler thread still busy after %.1fs", timeout or 0.0)
                return
        with self._state_lock:
            if self._thread is thread:
                self._thread = None
        logger.info("Scheduler stopped")

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self.run_cycle()
            self._stop_event.wait(self._cycle_delay)

    def run_cycle(self) -> int:
        """Probe every registered node once. Returns how many were published."""
        published = 0
        for node in self._registry:
            if self._stop_event.is_set():
                break
            if self.probe_node(node):
                published += 1
            self._stop_event.wait(self._node_delay)
        return published

    def probe_node(self, node: MonitoredNode) -> bool:
        """Probe, parse and publish one node. Logs and returns False on failure."""
        try:
            reply = self._prober.probe(node, self._payload)
            status = StatusParser.parse(reply)
            self._publisher.publish(self._sink, reply, status, node=node)
        except SentinelError as error:
            logger.error("Skipping node %s: %s", node.address, error)
            return False
        except Exception:
            logger.exception("Unexpected failure probing %s", node.address)
            return False
        return True
