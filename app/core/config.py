"""
Application configuration models and helpers.

Centralizes settings management so the FastAPI app, the serverless entry point
and the helper scripts share a consistent configuration surface.
"""

from functools import lru_cache
from typing import Annotated
import tempfile

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_DEFAULT_CORS_METHODS: tuple[str, ...] = (
    "GET",
    "OPTIONS",
    "PATCH",
    "DELETE",
    "POST",
    "PUT",
)
_DEFAULT_CORS_HEADERS: tuple[str, ...] = (
    "X-CSRF-Token",
    "X-Requested-With",
    "Accept",
    "Accept-Version",
    "Content-Length",
    "Content-MD5",
    "Content-Type",
    "Date",
    "X-Api-Version",
)


def _split_csv(value: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Support providing list settings as a comma-separated string."""
    if isinstance(value, tuple):
        return value
    if isinstance(value, list):
        return tuple(value)
    return tuple(item.strip() for item in value.split(",") if item.strip())


class GeminiSettings(BaseSettings):
    """Configuration for Gemini model access."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: str = Field(..., description="API key for the Gemini endpoint.")
    vision_model_name: str = Field("gemini-1.5-flash")
    max_output_tokens: int = Field(
        1000,
        gt=0,
        description="Upper bound on tokens generated for a single extraction.",
    )


class UploadSettings(BaseSettings):
    """Limits and staging location for uploaded screenshots."""

    model_config = SettingsConfigDict(
        env_prefix="UPLOAD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    field_name: str = Field(
        "screenshot",
        description="Multipart field that carries the screenshot file.",
    )
    max_bytes: int = Field(10 * 1024 * 1024, gt=0)
    temp_dir: str = Field(
        default_factory=tempfile.gettempdir,
        description="Directory used to stage uploads for the duration of a request.",
    )


class CORSSettings(BaseSettings):
    """Headers attached to every response for cross-origin browser clients."""

    model_config = SettingsConfigDict(
        env_prefix="CORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    allow_origin: str = Field("*")
    allow_credentials: bool = Field(True)
    allow_methods: Annotated[tuple[str, ...], NoDecode] = Field(_DEFAULT_CORS_METHODS)
    allow_headers: Annotated[tuple[str, ...], NoDecode] = Field(_DEFAULT_CORS_HEADERS)

    @field_validator("allow_methods", "allow_headers", mode="before")
    @classmethod
    def _split_lists(
        cls, value: str | tuple[str, ...] | list[str]
    ) -> tuple[str, ...]:
        return _split_csv(value)


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    upload: UploadSettings = Field(default_factory=UploadSettings)
    cors: CORSSettings = Field(default_factory=CORSSettings)


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "CORSSettings",
    "GeminiSettings",
    "UploadSettings",
    "get_settings",
]
