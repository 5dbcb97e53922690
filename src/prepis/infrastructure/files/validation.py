"""Input media file validation."""

from __future__ import annotations

import logging
from pathlib import Path

from prepis.domain.errors import MediaValidationError
from prepis.domain.transfer_types import DEFAULT_MAX_OBJECT_SIZE_BYTES, MIB

SUPPORTED_EXTENSIONS = (
    "mp4",
    "mov",
    "avi",
    "flv",
    "mp3",
    "wav",
    "flac",
    "m4a",
    "webm",
    "mkv",
)

logger = logging.getLogger(__name__)


def validate_media_file(
    path: Path,
    max_size_bytes: int = DEFAULT_MAX_OBJECT_SIZE_BYTES,
) -> int:
    """Check that `path` is a non-empty supported media file and return its size."""

    if not path.exists():
        raise MediaValidationError(f"File does not exist: {path}")
    if not path.is_file():
        raise MediaValidationError(f"Path is not a file: {path}")

    extension = path.suffix.lstrip(".")
    if not extension:
        raise MediaValidationError("File has no extension")
    if extension.lower() not in SUPPORTED_EXTENSIONS:
        raise MediaValidationError(
            f"Unsupported file format: {extension}. "
            f"Supported formats: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    try:
        size = path.stat().st_size
    except OSError as exc:
        raise MediaValidationError(f"Cannot read file metadata for {path}: {exc}") from exc

    if size > max_size_bytes:
        raise MediaValidationError(
            f"File size ({size / MIB:.2f} MiB) exceeds maximum limit of "
            f"{max_size_bytes / MIB:.0f} MiB"
        )
    if size == 0:
        raise MediaValidationError("File is empty")

    logger.info("File validation passed: %s (%.2f MiB)", path, size / MIB)
    return size


__all__ = ["SUPPORTED_EXTENSIONS", "validate_media_file"]
