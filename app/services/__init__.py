"""Service layer exports."""

from .screenshot_analysis import ScreenshotAnalysisService
from .uploads import (
    UploadedImage,
    UploadTooLargeError,
    ensure_declared_size,
    read_upload,
    staged_upload,
)

__all__ = [
    "ScreenshotAnalysisService",
    "UploadTooLargeError",
    "UploadedImage",
    "ensure_declared_size",
    "read_upload",
    "staged_upload",
]
