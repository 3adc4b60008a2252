"""FastAPI application factory and server entry point."""

import uvicorn
from fastapi import FastAPI

from focustracks import __version__
from focustracks.api.exception_handlers import register_exception_handlers
from focustracks.api.routers import api_router, health
from focustracks.config import Settings, get_settings
from focustracks.infrastructure.lifecycle import build_lifespan
from focustracks.infrastructure.observability.middleware import (
    RequestLoggingMiddleware,
)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Explicit settings (tests); defaults to get_settings()
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="FocusTracks",
        description="Curated focus music catalog with user playlists",
        version=__version__,
        debug=settings.debug,
        lifespan=build_lifespan(settings),
    )
    app.state.settings = settings

    register_exception_handlers(app)
    app.add_middleware(
        RequestLoggingMiddleware,
        log_request_body=settings.observability.log_request_body,
    )

    app.include_router(health.router, prefix="/health", tags=["Health"])
    app.include_router(api_router, prefix="/api")
    return app


def run() -> None:
    """Run the API server (console script `focustracks`)."""
    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
