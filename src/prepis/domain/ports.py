"""Ports for object storage, transcription jobs, results, progress and time."""

from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from prepis.domain.job_states import JobHandle, JobState
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot
from prepis.domain.transfer_types import CompletedPart, MultipartSession


class ObjectStore(Protocol):
    """Object storage port used by the uploader and cleanup."""

    async def put_object(self, bucket: str, key: str, body: bytes) -> None:
        """Store a whole object in one call."""

    async def create_multipart(self, bucket: str, key: str) -> MultipartSession:
        """Start a multipart upload session."""

    async def upload_part(
        self,
        session: MultipartSession,
        part_number: int,
        body: bytes,
    ) -> CompletedPart:
        """Store one multipart segment."""

    async def complete_multipart(
        self,
        session: MultipartSession,
        parts: list[CompletedPart],
    ) -> None:
        """Assemble stored segments in the given order."""

    async def abort_multipart(self, session: MultipartSession) -> None:
        """Release an unfinished multipart session."""

    async def delete_object(self, bucket: str, key: str) -> None:
        """Delete one stored object."""


@runtime_checkable
class CredentialsVerifier(Protocol):
    """Optional store extension that checks credentials before any transfer."""

    async def verify_credentials(self) -> None:
        """Raise `CredentialsError` when credentials are unusable."""


class JobService(Protocol):
    """Remote transcription job port."""

    async def submit(self, source_locator: str, job_name: str) -> JobHandle:
        """Start a job for the media at `source_locator`."""

    async def get_status(self, handle: JobHandle) -> JobState:
        """Return the current job state."""


class ResultStore(Protocol):
    """Result payload retrieval port."""

    async def get(self, result_locator: str) -> bytes:
        """Return the raw payload stored at `result_locator`."""


class ProgressSink(Protocol):
    """Display target for upload progress."""

    def render(self, snapshot: ProgressSnapshot) -> None:
        """Show the latest progress snapshot."""

    def finish(self, snapshot: ProgressSnapshot, outcome: ProgressOutcome) -> None:
        """Show the final line and release display resources."""


class Clock(Protocol):
    """Monotonic time source with cancellable sleep."""

    def monotonic(self) -> float:
        """Return monotonic time in seconds."""

    async def sleep(self, seconds: float, cancel_event: asyncio.Event | None = None) -> bool:
        """Sleep for `seconds`; return True when woken early by `cancel_event`."""


__all__ = [
    "Clock",
    "CredentialsVerifier",
    "JobService",
    "ObjectStore",
    "ProgressSink",
    "ResultStore",
]
