"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache

from app.clients import GeminiClient
from app.core.config import get_settings
from app.services import ScreenshotAnalysisService


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_gemini_client() -> GeminiClient:
    """Provide Gemini client instance."""
    settings = _settings()
    return GeminiClient(settings.gemini)


def get_screenshot_analysis_service() -> ScreenshotAnalysisService:
    """Build a screenshot analysis service around the shared Gemini client."""
    settings = _settings()
    return ScreenshotAnalysisService(
        get_gemini_client(),
        upload_settings=settings.upload,
        gemini_settings=settings.gemini,
    )


__all__ = [
    "get_gemini_client",
    "get_screenshot_analysis_service",
]
