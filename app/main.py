"""
FastAPI application entrypoint for the investment screenshot analyzer.
"""

from __future__ import annotations

from fastapi import FastAPI

from app.api.routes import router as api_router
from app.core.config import get_settings
from app.core.cors import install_cors
from app.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Investment Screenshot Analyzer",
        version="0.1.0",
        description=(
            "Extracts structured investment data from account screenshots "
            "and grades it."
        ),
    )
    install_cors(app, settings.cors)
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
