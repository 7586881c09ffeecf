"""Helpers for reading uploaded screenshots and staging them on disk."""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Iterator

from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)

_READ_CHUNK_SIZE = 1024 * 1024
_DEFAULT_FILENAME = "screenshot"
_DEFAULT_MIME_TYPE = "application/octet-stream"
# Room for multipart boundaries, part headers and small text fields.
MULTIPART_OVERHEAD_BYTES = 64 * 1024


class UploadTooLargeError(ValueError):
    """Raised when an upload exceeds the configured size bound."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Uploaded file exceeds the {limit} byte limit.")
        self.limit = limit


def _sanitize_filename(filename: str | None) -> str:
    """Keep only the final path component of a client-supplied filename."""
    name = PurePath((filename or "").replace("\\", "/")).name.strip()
    return name or _DEFAULT_FILENAME


@dataclass(slots=True)
class UploadedImage:
    """An uploaded screenshot held in memory for the lifetime of one request."""

    data: bytes
    mime_type: str
    filename: str
    storage_key: str = field(init=False)

    def __post_init__(self) -> None:
        self.filename = _sanitize_filename(self.filename)
        self.mime_type = self.mime_type or _DEFAULT_MIME_TYPE
        self.storage_key = f"{uuid.uuid4().hex}-{self.filename}"

    @property
    def size(self) -> int:
        return len(self.data)


def ensure_declared_size(content_length: str | None, *, max_bytes: int) -> None:
    """Reject a request whose declared body is too large to hold a valid upload."""
    if not content_length:
        return
    try:
        declared = int(content_length)
    except ValueError:
        return
    if declared > max_bytes + MULTIPART_OVERHEAD_BYTES:
        raise UploadTooLargeError(max_bytes)


async def read_upload(upload: UploadFile, *, max_bytes: int) -> UploadedImage:
    """Read ``upload`` into memory, refusing anything larger than ``max_bytes``."""
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await upload.read(_READ_CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise UploadTooLargeError(max_bytes)
        chunks.append(chunk)

    return UploadedImage(
        data=b"".join(chunks),
        mime_type=upload.content_type or _DEFAULT_MIME_TYPE,
        filename=upload.filename or _DEFAULT_FILENAME,
    )


@contextmanager
def staged_upload(image: UploadedImage, directory: str | Path) -> Iterator[Path]:
    """Write ``image`` to ``directory`` and remove it when the block exits."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / image.storage_key
    try:
        path.write_bytes(image.data)
        logger.debug("Staged upload at %s (%d bytes)", path, image.size)
        yield path
    finally:
        if path.exists():
            path.unlink()
            logger.debug("Removed staged upload %s", path)


__all__ = [
    "UploadTooLargeError",
    "UploadedImage",
    "ensure_declared_size",
    "read_upload",
    "staged_upload",
]
