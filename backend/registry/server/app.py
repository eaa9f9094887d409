from __future__ import annotations

import contextlib
import importlib
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from registry.beacon.ingestor import BeaconIngestor
from registry.beacon.listener import open_beacon_endpoint
from registry.directory.codec import encode_servers
from registry.directory.store import ServerDirectory
from registry.health.probe import UdpReportProbe
from registry.health.tracker import HealthTracker
from registry.server.settings import RegistryServerSettings
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

    from registry.beacon.types import BeaconParser
    from registry.health.probe import Probe


def load_beacon_parser(path: str) -> BeaconParser:
    """Import the parser named by a 'module:attribute' path."""
    module_name, _, attr = path.partition(":")
    module = importlib.import_module(module_name)
    try:
        return getattr(module, attr)
    except AttributeError as e:
        msg = f"module {module_name!r} has no attribute {attr!r}"
        raise ImportError(msg) from e


async def health(request: Request) -> JSONResponse:
    directory: ServerDirectory = request.app.state.directory
    return JSONResponse(
        {
            "status": "ok",
            "servers": await directory.count(),
            "healthy": await directory.healthy_count(),
        },
    )


async def list_servers(request: Request) -> PlainTextResponse:
    directory: ServerDirectory = request.app.state.directory
    return PlainTextResponse(encode_servers(await directory.snapshot()))


def create_app(
    settings: RegistryServerSettings | None = None,
    *,
    directory: ServerDirectory | None = None,
    parser: BeaconParser | None = None,
    probe: Probe | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = RegistryServerSettings()
    if directory is None:
        directory = ServerDirectory()
    if probe is None:
        probe = UdpReportProbe(timeout=settings.probe_timeout_seconds)

    tracker = HealthTracker(directory, probe)
    ingestor = BeaconIngestor(directory, parser) if parser is not None else None

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncGenerator[None]:
        transport = None
        if ingestor is not None:
            transport = await open_beacon_endpoint(ingestor, settings.beacon_host, settings.beacon_port)
        else:
            logger.warning("no beacon parser configured, beacons will not be received")
        tracker.start()
        try:
            yield
        finally:
            await tracker.stop()
            if transport is not None:
                transport.close()

    app = Starlette(
        routes=[
            Route("/servers", list_servers, methods=["GET"], name="list_servers"),
            Route("/health", health, methods=["GET"], name="health"),
        ],
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.directory = directory
    app.state.tracker = tracker
    app.state.ingestor = ingestor

    logger.info("registry server ready")
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory registry.server.app:get_app."""
    settings = RegistryServerSettings()
    setup_logging("registry")
    parser = load_beacon_parser(settings.beacon_parser) if settings.beacon_parser else None
    return create_app(settings, parser=parser)
