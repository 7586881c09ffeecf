"""
FastAPI dependency utilities for injecting configuration.
"""

from typing import Annotated

from fastapi import Depends

from app.core.config import AppSettings, UploadSettings, get_settings


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return get_settings()


SettingsDependency = Depends(get_app_settings)


def get_upload_settings(
    settings: Annotated[AppSettings, SettingsDependency],
) -> UploadSettings:
    """Expose only the upload limits to handlers that accept files."""
    return settings.upload


__all__ = ["SettingsDependency", "get_app_settings", "get_upload_settings"]
