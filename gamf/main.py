"""
FastAPI application entrypoint for the GitHub App Manifest flow broker.
"""

from __future__ import annotations

from fastapi import FastAPI

from gamf import __version__
from gamf.api.routes import router as api_router
from gamf.core.config import AppSettings, get_settings
from gamf.core.logging import configure_logging
from gamf.core.middleware import AccessLogMiddleware, RequestTimeoutMiddleware


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Factory for the FastAPI application."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="gamf - GitHub App Manifest Flow",
        version=__version__,
        description="Programmatic GitHub App creation via the manifest flow.",
    )
    app.add_middleware(
        RequestTimeoutMiddleware, timeout_seconds=settings.request_timeout_seconds
    )
    app.add_middleware(AccessLogMiddleware)
    app.include_router(api_router)
    return app


app = create_app()

__all__ = ["app", "create_app"]
