"""Progress sink implementations."""

from prepis.infrastructure.progress.logging_progress_sink import (
    LoggingProgressSink,
    format_progress_line,
)
from prepis.infrastructure.progress.noop_progress_sink import NoopProgressSink
from prepis.infrastructure.progress.rich_progress_sink import RichProgressSink

__all__ = [
    "LoggingProgressSink",
    "NoopProgressSink",
    "RichProgressSink",
    "format_progress_line",
]
