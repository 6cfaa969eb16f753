"""FastAPI application factory.

API layer:
- Validates inputs, drives the session controller
- Returns payloads for UI
- Forbidden: statistics computation, direct origin calls
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from cachebench.config import Settings, configure_logging
from cachebench.session.controller import SessionController
from cachebench.session.sinks import SnapshotSink
from cachebench.sources.base import SampleSourceBase
from cachebench.sources.http import HttpSampleSource
from cachebench.sources.mock import MockSampleSource

logger = logging.getLogger(__name__)


def build_source(settings: Settings) -> SampleSourceBase:
    """Create the sample source selected by settings."""
    if settings.source == "mock":
        return MockSampleSource()
    return HttpSampleSource(
        base_url=settings.origin_url,
        timeout_s=settings.timeout_s,
        hit_threshold_ms=settings.hit_threshold_ms,
    )


def get_controller(request: Request) -> SessionController:
    """Dependency to get the app's session controller."""
    return request.app.state.controller


def get_snapshot_sink(request: Request) -> SnapshotSink:
    """Dependency to get the sink backing the API views."""
    return request.app.state.snapshot_sink


def create_app(
    controller: SessionController | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        controller: Optional prebuilt controller (tests inject one backed by
            a scripted source).
        settings: Optional settings; read from the environment otherwise.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings.from_env()
    configure_logging(settings.log_level)

    if controller is None:
        controller = SessionController(
            build_source(settings),
            recent_limit=settings.recent_limit,
        )
        logger.info(f"Session started against {settings.source} source ({settings.origin_url})")

    snapshot_sink = SnapshotSink()
    controller.add_sink(snapshot_sink)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        controller.close()

    app = FastAPI(
        title="cachebench API",
        description="Cached vs uncached fetch latency comparison",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.controller = controller
    app.state.snapshot_sink = snapshot_sink

    # Add CORS middleware for UI access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routes
    from cachebench.api.routes import session

    app.include_router(session.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
