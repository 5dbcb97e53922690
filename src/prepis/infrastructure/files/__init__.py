"""Local file helpers: media validation and transcript output."""

from prepis.infrastructure.files.validation import SUPPORTED_EXTENSIONS, validate_media_file
from prepis.infrastructure.files.writing import save_transcription

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "save_transcription",
    "validate_media_file",
]
