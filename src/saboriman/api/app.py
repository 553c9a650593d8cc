"""FastAPI application factory."""

from collections.abc import Callable

from fastapi import FastAPI

from saboriman import __version__
from saboriman.api.exception_handlers import register_exception_handlers
from saboriman.api.routers import api_router, health
from saboriman.config import Settings, get_settings
from saboriman.domain.ports import IAudioProber
from saboriman.infrastructure.lifecycle import lifespan
from saboriman.infrastructure.observability import RequestLoggingMiddleware


def create_app(
    settings: Settings | None = None,
    prober_factory: Callable[[], IAudioProber] | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Settings to run with, defaults to get_settings()
        prober_factory: Override the audio prober used by scans (tests)
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        description="Personal music library backend",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.prober_factory = prober_factory

    app.add_middleware(RequestLoggingMiddleware)
    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(api_router)

    return app
