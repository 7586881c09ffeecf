"""Expose dependency helpers for FastAPI routers."""

from .clients import get_gemini_client, get_screenshot_analysis_service
from .config import SettingsDependency, get_app_settings, get_upload_settings

__all__ = [
    "SettingsDependency",
    "get_app_settings",
    "get_gemini_client",
    "get_screenshot_analysis_service",
    "get_upload_settings",
]
