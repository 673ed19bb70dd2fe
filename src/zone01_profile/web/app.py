"""
FastAPI application for the Zone01 Profile dashboard.

PURPOSE: Application factory and server runner.
AI CONTEXT: Creates the app with all routes registered.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from ..__version__ import __version__
from ..config import Config
from .routes import router

__all__ = ["create_app", "run_dashboard"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:  # noqa: ARG001
    """
    Log dashboard startup and shutdown.

    Business context: Startup logging shows which platform domain the
    dashboard talks to, which is the first thing to check when every
    sign-in fails.

    Args:
        app: The FastAPI application instance (provided by FastAPI).

    Yields:
        None. Control returns to FastAPI to handle requests.
    """
    logger.info("Zone01 Profile dashboard starting (v%s) for %s", __version__, Config.get_domain())
    yield
    logger.info("Zone01 Profile dashboard shutting down")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI dashboard application.

    Factory function used by uvicorn (factory=True) and by tests.

    Returns:
        FastAPI application with the profile, login, chart and API routes
        registered and OpenAPI docs at /docs.

    Example:
        >>> from fastapi.testclient import TestClient
        >>> client = TestClient(create_app())
        >>> client.get("/login").status_code
        200
    """
    app = FastAPI(
        title="Zone01 Profile",
        description="Dashboard for Zone01 student progress: XP, level, audits and ranking",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


def run_dashboard(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the Zone01 Profile web dashboard server.

    Starts a uvicorn ASGI server hosting the FastAPI application. Blocks
    until the server is stopped (Ctrl+C).

    Args:
        host: Interface to bind. '127.0.0.1' (default) keeps the dashboard
            local, which matters because it acts with the stored token.
        port: TCP port. Default 8000.
        reload: Auto-reload on code changes (development only).
        log_level: Uvicorn logging verbosity.

    Raises:
        OSError: If the port is already in use or host is invalid.

    Example:
        >>> run_dashboard(port=8080)
        # Server runs at http://127.0.0.1:8080
    """
    uvicorn.run(
        "zone01_profile.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )
