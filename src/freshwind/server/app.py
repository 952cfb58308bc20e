"""Application assembly and server lifecycle."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator

from fastapi import FastAPI

from freshwind import __version__
from freshwind.config import Config
from freshwind.logging import get_logger, level_for
from freshwind.server.registry import ReloadRegistry
from freshwind.server.routes import register_routes
from freshwind.watching import ChangeDetector, ChangeScanner, FilterSet, WatchLoop

log = get_logger("server")


def create_app(
    config: Config,
    registry: ReloadRegistry | None = None,
    detector: ChangeDetector | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    The watch loop runs as a background task for the lifetime of the app.

    Args:
        config: Server configuration.
        registry: Subscriber registry; a new one is created if omitted.
        detector: Change detector; defaults to a ChangeScanner over
            ``config.root`` using the configured filters.

    Raises:
        FilterConfigError: If a configured pattern does not compile.
    """
    if registry is None:
        registry = ReloadRegistry()
    if detector is None:
        filters = FilterSet.from_strings(config.include, config.exclude)
        detector = ChangeScanner(config.root, filters)
        log.info("Filters: %s", filters.describe())

    watch_loop = WatchLoop(detector, registry, interval=config.interval)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task = asyncio.create_task(watch_loop.run())
        try:
            yield
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            await registry.close_all()

    app = FastAPI(
        title="freshwind",
        description="Static file server with live reload",
        version=__version__,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.config = config
    app.state.registry = registry
    app.state.watch_loop = watch_loop

    register_routes(app, config, registry)

    return app


async def serve(config: Config) -> None:
    """Build the app and serve it until interrupted."""
    # Import here to keep startup light for --help and tests
    import uvicorn

    app = create_app(config)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=logging.getLevelName(max(level_for(config.logging), logging.WARNING)).lower(),
        access_log=False,
    )
    server = uvicorn.Server(uvicorn_config)

    log.info("Serving %s on http://%s:%d", config.root.resolve(), config.host, config.port)
    await server.serve()
