"""Infrastructure layer public API."""

from prepis.infrastructure.files import (
    save_transcription,
    validate_media_file,
)
from prepis.infrastructure.jobs import TranscribeJobService
from prepis.infrastructure.progress import (
    LoggingProgressSink,
    NoopProgressSink,
    RichProgressSink,
)
from prepis.infrastructure.results import HttpResultStore
from prepis.infrastructure.runtime import AsyncioClock
from prepis.infrastructure.storage import S3ObjectStore

__all__ = [
    "AsyncioClock",
    "HttpResultStore",
    "LoggingProgressSink",
    "NoopProgressSink",
    "RichProgressSink",
    "S3ObjectStore",
    "TranscribeJobService",
    "save_transcription",
    "validate_media_file",
]
