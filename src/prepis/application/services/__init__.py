"""Application services public API."""

from prepis.application.services.job_poller import JobPoller
from prepis.application.services.progress_tracker import ProgressTracker
from prepis.application.services.result_fetcher import ResultFetcher, decode_transcript_payload
from prepis.application.services.transcription_service import (
    TranscriptionOutcome,
    TranscriptionService,
)
from prepis.application.services.uploader import Uploader

__all__ = [
    "JobPoller",
    "ProgressTracker",
    "ResultFetcher",
    "TranscriptionOutcome",
    "TranscriptionService",
    "Uploader",
    "decode_transcript_payload",
]
