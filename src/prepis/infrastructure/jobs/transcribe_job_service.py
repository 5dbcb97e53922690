"""Amazon Transcribe job service adapter."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any, Protocol, cast

from prepis.domain.errors import JobStatusError, JobSubmissionError
from prepis.domain.job_states import JobHandle, JobState

_DEFAULT_LANGUAGE_CODE = "en-US"
_UNKNOWN_FAILURE_REASON = "Unknown failure reason"

logger = logging.getLogger(__name__)


class TranscribeClient(Protocol):
    """Subset of Transcribe client operations used by the job service."""

    def start_transcription_job(
        self,
        *,
        TranscriptionJobName: str,
        Media: dict[str, str],
        LanguageCode: str,
    ) -> dict[str, Any]:
        """Start one transcription job."""

    def get_transcription_job(self, *, TranscriptionJobName: str) -> dict[str, Any]:
        """Describe one transcription job."""


class TranscribeJobService:
    """Submit and inspect Amazon Transcribe jobs."""

    def __init__(
        self,
        region: str | None = None,
        language_code: str = _DEFAULT_LANGUAGE_CODE,
        transcribe_client_factory: Callable[[str | None], TranscribeClient] | None = None,
    ) -> None:
        self._region = region
        self._language_code = language_code
        self._transcribe_client_factory = (
            transcribe_client_factory or _build_default_transcribe_client
        )
        self._client: TranscribeClient | None = None

    @property
    def client(self) -> TranscribeClient:
        """Return the Transcribe client, creating it on first use."""

        if self._client is None:
            self._client = self._transcribe_client_factory(self._region)
        return self._client

    async def submit(self, source_locator: str, job_name: str) -> JobHandle:
        """Start a transcription job for the media at `source_locator`."""

        logger.info("Starting transcription job '%s' for %s.", job_name, source_locator)
        try:
            await asyncio.to_thread(
                self.client.start_transcription_job,
                TranscriptionJobName=job_name,
                Media={"MediaFileUri": source_locator},
                LanguageCode=self._language_code,
            )
        except Exception as exc:  # noqa: BLE001
            raise JobSubmissionError(
                f"Failed to start transcription job '{job_name}': {exc}"
            ) from exc
        return JobHandle(job_name=job_name)

    async def get_status(self, handle: JobHandle) -> JobState:
        """Map the remote job description onto a `JobState`."""

        try:
            response = await asyncio.to_thread(
                self.client.get_transcription_job,
                TranscriptionJobName=handle.job_name,
            )
        except Exception as exc:  # noqa: BLE001
            raise JobStatusError(f"Failed to get status of job '{handle}': {exc}") from exc

        job = response.get("TranscriptionJob")
        if not isinstance(job, dict):
            raise JobStatusError(f"Job '{handle}' not found.")
        return _job_state_from_description(handle, job)


def _job_state_from_description(handle: JobHandle, job: dict[str, Any]) -> JobState:
    status = job.get("TranscriptionJobStatus")
    if status == "QUEUED":
        return JobState.queued()
    if status == "IN_PROGRESS":
        return JobState.in_progress()
    if status == "COMPLETED":
        transcript = job.get("Transcript")
        uri = transcript.get("TranscriptFileUri") if isinstance(transcript, dict) else None
        if not isinstance(uri, str) or not uri:
            raise JobStatusError(f"Job '{handle}' completed but no transcript URI found.")
        return JobState.completed(uri)
    if status == "FAILED":
        reason = job.get("FailureReason")
        if not isinstance(reason, str) or not reason.strip():
            reason = _UNKNOWN_FAILURE_REASON
        return JobState.failed(reason)
    raise JobStatusError(f"Job '{handle}' reported unknown status '{status}'.")


def _build_default_transcribe_client(region: str | None) -> TranscribeClient:
    """Create a boto3 Transcribe client lazily to avoid import-time hard dependency."""

    try:
        import boto3  # type: ignore[import-not-found]
    except ModuleNotFoundError as exc:
        raise RuntimeError(
            "boto3 is required for Amazon Transcribe jobs. Install project dependencies first."
        ) from exc

    client = boto3.client("transcribe", region_name=region)
    return cast(TranscribeClient, client)


__all__ = ["TranscribeClient", "TranscribeJobService"]
