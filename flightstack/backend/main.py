"""
FastAPI Application Entry Point.

Proxy relay: /api/flights and /api/airports forward to Aviationstack,
/health answers liveness probes, everything else is served from the
static directory (public/ by default).
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from flightstack.backend.api import health, proxy
from flightstack.backend.core.config import (
    get_app_config,
    get_settings,
    get_static_directory,
    require_server_api_key,
)
from flightstack.backend.core.exception_handlers import register_exception_handlers
from flightstack.backend.core.logging import get_logger, setup_logging
from flightstack.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    # Same check as run.py, for uvicorn started directly
    require_server_api_key()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
            "use_https": get_settings().use_https,
        },
    )
    yield
    logger.info("Application shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["GET"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(proxy.router, prefix="/api", tags=["proxy"])

    # Mounted last so the routes above take precedence
    static_dir = get_static_directory()
    app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")
    logger.debug("Static directory mounted", extra={"directory": str(static_dir)})

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    Creates the app on first call and caches it. Use this instead of
    importing `app` directly to avoid import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn flightstack.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
