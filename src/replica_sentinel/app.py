"""Litestar application factory and CLI entry point."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from urllib.parse import urlparse

from litestar import Litestar
from litestar.datastructures import State
from litestar.di import Provide

from replica_sentinel.clients.prober import Prober
from replica_sentinel.config import ConfigLoader, Settings
from replica_sentinel.controllers.health import HealthController
from replica_sentinel.controllers.manifest import ManifestController
from replica_sentinel.controllers.node import NodeController
from replica_sentinel.models.node import MonitoredNode
from replica_sentinel.plugins.contracts.sink import Sink
from replica_sentinel.plugins.contracts.transport import Transport
from replica_sentinel.plugins.contracts.uploader import ArtifactUploader
from replica_sentinel.plugins.http_sink import HttpSink
from replica_sentinel.plugins.log_sink import LogSink
from replica_sentinel.plugins.registry_group_store import RegistryGroupStore
from replica_sentinel.plugins.s3_uploader import S3ArtifactUploader
from replica_sentinel.plugins.tcp_sink import TcpSink
from replica_sentinel.plugins.tcp_transport import TcpTransport
from replica_sentinel.resources.health import HealthResource
from replica_sentinel.resources.manifest import ManifestResource
from replica_sentinel.resources.node import NodeResource
from replica_sentinel.services.manifest_service import ManifestService
from replica_sentinel.services.node_registry import NodeRegistry
from replica_sentinel.services.publisher import Publisher
from replica_sentinel.services.scheduler import Scheduler
from replica_sentinel.utils.status_parser import StatusParser


class AppFactory:
    """Builds and configures the Litestar application. All methods are static."""

    @staticmethod
    def build_sink(url: str, *, timeout: float = 3.0) -> Sink:
        """Pick a sink from ``sink_url``: ``tcp://``, ``http(s)://`` or empty.

        Raises:
            ValueError: If the scheme is not supported.
        """
        if not url:
            return LogSink()
        parsed = urlparse(url)
        if parsed.scheme == "tcp":
            if not parsed.hostname or parsed.port is None:
                raise ValueError(f"tcp sink needs host and port: {url}")
            return TcpSink(parsed.hostname, parsed.port, timeout=timeout)
        if parsed.scheme in ("http", "https"):
            return HttpSink(url, timeout=timeout)
        raise ValueError(f"Unsupported sink scheme: {parsed.scheme!r}")

    @staticmethod
    def build_prober(settings: Settings, transport: Transport | None = None) -> Prober:
        """Prober over TCP unless a transport is injected."""
        if transport is None:
            transport = TcpTransport(
                connect_timeout=settings.connect_timeout,
                read_timeout=settings.read_timeout,
            )
        return Prober(
            transport,
            max_reply_bytes=settings.max_reply_bytes,
            strict_reply_size=settings.strict_reply_size,
            reply_timeout=settings.read_timeout,
        )

    @staticmethod
    def _build(
        settings: Settings,
        *,
        transport: Transport | None = None,
        sink: Sink | None = None,
        uploader: ArtifactUploader | None = None,
    ) -> State:
        """Construct the full object graph once.

        settings.nodes → registry ─┬→ scheduler (prober, publisher, sink)
                                   ├→ NodeResource
                                   └→ group_store → manifest_service → ManifestResource
        scheduler → HealthResource
        """
        registry = NodeRegistry()
        for node in settings.nodes:
            registry.add_host(node.host, node.port, node.group_id, node.term_id)
        if sink is None:
            sink = AppFactory.build_sink(settings.sink_url, timeout=settings.connect_timeout)
        scheduler = Scheduler(
            registry=registry,
            prober=AppFactory.build_prober(settings, transport),
            publisher=Publisher(),
            sink=sink,
            payload=settings.heartbeat_payload,
            node_delay=settings.node_delay_seconds,
            cycle_delay=settings.cycle_delay_seconds,
        )
        if uploader is None:
            uploader = S3ArtifactUploader(
                access_key=settings.cloud_access_key,
                secret_key=settings.cloud_secret_key,
                region=settings.cloud_bucket_region,
                endpoint_url=settings.cloud_endpoint_override,
            )
        manifest_service = ManifestService(
            RegistryGroupStore(registry), uploader, max_group_id=settings.max_group_id,
        )
        return State({
            "settings": settings,
            "sink": sink,
            "scheduler": scheduler,
            "health": HealthResource(scheduler),
            "node": NodeResource(registry),
            "manifest": ManifestResource(manifest_service),
        })

    @staticmethod
    @asynccontextmanager
    async def _lifespan(app: Litestar) -> AsyncIterator[None]:
        """Start the probe loop on startup, stop it and close the sink on shutdown."""
        scheduler: Scheduler = app.state.scheduler
        if app.state.settings.scheduler_enabled:
            scheduler.start()
        try:
            yield
        finally:
            await asyncio.to_thread(scheduler.stop)
            app.state.sink.close()

    @staticmethod
    def provide_health(state: State) -> HealthResource:
        """Provide the pre-built HealthResource from app state."""
        health_resource: HealthResource = state.health
        return health_resource

    @staticmethod
    def provide_node(state: State) -> NodeResource:
        """Provide the pre-built NodeResource from app state."""
        node_resource: NodeResource = state.node
        return node_resource

    @staticmethod
    def provide_manifest(state: State) -> ManifestResource:
        """Provide the pre-built ManifestResource from app state."""
        manifest_resource: ManifestResource = state.manifest
        return manifest_resource

    @staticmethod
    def create_app(
        settings: Settings | None = None,
        *,
        transport: Transport | None = None,
        sink: Sink | None = None,
        uploader: ArtifactUploader | None = None,
    ) -> Litestar:
        """Create and configure the Litestar application."""
        if settings is None:
            settings = ConfigLoader.load_settings()
        return Litestar(
            route_handlers=[HealthController, NodeController, ManifestController],
            state=AppFactory._build(
                settings, transport=transport, sink=sink, uploader=uploader,
            ),
            lifespan=[AppFactory._lifespan],
            dependencies={
                "health_resource": Provide(AppFactory.provide_health, sync_to_thread=False),
                "node_resource": Provide(AppFactory.provide_node, sync_to_thread=False),
                "manifest_resource": Provide(AppFactory.provide_manifest, sync_to_thread=False),
            },
        )


# Public alias so conftest / uvicorn can call create_app() without knowing AppFactory.
create_app = AppFactory.create_app


class CLI:
    """Command-line interface for replica-sentinel."""

    @staticmethod
    def _build_parser() -> argparse.ArgumentParser:
        """Build the CLI argument parser."""
        parser = argparse.ArgumentParser(
            prog="replica-sentinel", description="Replica Sentinel CLI",
        )
        subparsers = parser.add_subparsers(dest="command")

        run_parser = subparsers.add_parser("run", help="Start the API and the probe loop")
        run_parser.add_argument("--host", default="0.0.0.0")
        run_parser.add_argument("--port", type=int, default=8000)
        run_parser.add_argument("--reload", action="store_true", help="Auto-reload on file changes")

        probe_parser = subparsers.add_parser("probe", help="Probe one node and print the result")
        probe_parser.add_argument("node_host")
        probe_parser.add_argument("node_port", type=int)
        probe_parser.add_argument("--group-id", type=int, default=0)
        probe_parser.add_argument("--term-id", type=int, default=0)
        probe_parser.add_argument("--payload", default=None)

        return parser

    @staticmethod
    def _probe(args: argparse.Namespace, settings: Settings) -> None:
        """One exchange; raw reply then JSON status to stdout."""
        node = MonitoredNode(
            host=args.node_host, port=args.node_port,
            group_id=args.group_id, term_id=args.term_id,
        )
        payload = settings.heartbeat_payload if args.payload is None else args.payload
        reply = AppFactory.build_prober(settings).probe(node, payload)
        status = StatusParser.parse(reply)
        sys.stdout.write(reply.decode("utf-8", errors="replace"))
        sys.stdout.write("\n")
        sys.stdout.write(Publisher.serialize(status).decode())
        sys.stdout.write("\n")

    @staticmethod
    def main(argv: list[str] | None = None) -> None:
        """CLI entry point. Catches all exceptions and exits cleanly."""
        parser = CLI._build_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            sys.exit(1)

        try:
            settings = ConfigLoader.load_settings()
            logging.basicConfig(
                level=settings.log_level.upper(),
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            )
            if args.command == "run":
                import uvicorn

                uvicorn.run(
                    "replica_sentinel.app:create_app",
                    factory=True,
                    host=args.host,
                    port=args.port,
                    reload=args.reload,
                )
            elif args.command == "probe":
                CLI._probe(args, settings)
        except KeyboardInterrupt:
            pass
        except Exception as error:
            print(f"Error: {error}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    CLI.main()
