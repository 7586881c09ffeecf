"""
Fixed-header CORS handling.

Every response carries the same header set, and ``OPTIONS`` on any path is
answered with an empty ``200`` before routing.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import FastAPI, Request, Response

from app.core.config import CORSSettings

logger = logging.getLogger(__name__)


def build_cors_headers(settings: CORSSettings) -> dict[str, str]:
    """Return the header mapping attached to every response."""
    return {
        "Access-Control-Allow-Origin": settings.allow_origin,
        "Access-Control-Allow-Credentials": str(settings.allow_credentials).lower(),
        "Access-Control-Allow-Methods": ",".join(settings.allow_methods),
        "Access-Control-Allow-Headers": ", ".join(settings.allow_headers),
    }


def install_cors(app: FastAPI, settings: CORSSettings) -> None:
    """Register an HTTP middleware that answers preflights and decorates responses."""
    headers = build_cors_headers(settings)

    @app.middleware("http")
    async def _apply_cors_headers(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        if request.method == "OPTIONS":
            logger.debug("Answering CORS preflight for %s", request.url.path)
            return Response(status_code=200, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response


__all__ = ["build_cors_headers", "install_cors"]
