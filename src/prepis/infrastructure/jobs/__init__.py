"""Transcription job service adapters."""

from prepis.infrastructure.jobs.transcribe_job_service import (
    TranscribeClient,
    TranscribeJobService,
)

__all__ = ["TranscribeClient", "TranscribeJobService"]
