"""Expose constructed client wrappers."""

from .gemini import (
    CompletionRequest,
    CompletionResponseError,
    GeminiClient,
    GeminiModelError,
)

__all__ = [
    "CompletionRequest",
    "CompletionResponseError",
    "GeminiClient",
    "GeminiModelError",
]
