"""End-to-end transcription use-case service."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from prepis.application.services.job_poller import JobPoller
from prepis.application.services.progress_tracker import ProgressTracker
from prepis.application.services.result_fetcher import ResultFetcher
from prepis.application.services.uploader import Uploader
from prepis.domain.errors import CleanupError
from prepis.domain.naming import generate_job_name, generate_s3_key
from prepis.domain.ports import CredentialsVerifier, JobService, ObjectStore, ProgressSink
from prepis.domain.transfer_types import TransferHandle

_DEFAULT_KEY_PREFIX = "transcribe-temp"

logger = logging.getLogger(__name__)

MediaValidator = Callable[[Path], int]
TranscriptWriter = Callable[[Path, str], None]


@dataclass(slots=True, frozen=True)
class TranscriptionOutcome:
    """Result of one successful transcription run."""

    text: str
    job_name: str
    media_uri: str
    result_locator: str
    output_file: Path | None = None


class TranscriptionService:
    """Upload, transcribe, fetch and clean up one media file.

    The uploaded object is deleted on every exit path once the upload has
    succeeded. Delete failures are logged; in strict cleanup mode they raise
    `CleanupError`, but only when no other error is already propagating.
    """

    def __init__(
        self,
        object_store: ObjectStore,
        uploader: Uploader,
        job_service: JobService,
        job_poller: JobPoller,
        result_fetcher: ResultFetcher,
        *,
        progress_sink: ProgressSink,
        validate_media: MediaValidator,
        save_transcript: TranscriptWriter,
        fallback_progress_sink: ProgressSink | None = None,
        key_prefix: str = _DEFAULT_KEY_PREFIX,
        verify_credentials: bool = True,
        strict_cleanup: bool = False,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        self._object_store = object_store
        self._uploader = uploader
        self._job_service = job_service
        self._job_poller = job_poller
        self._result_fetcher = result_fetcher
        self._progress_sink = progress_sink
        self._fallback_progress_sink = fallback_progress_sink
        self._validate_media = validate_media
        self._save_transcript = save_transcript
        self._key_prefix = key_prefix
        self._verify_credentials = verify_credentials
        self._strict_cleanup = strict_cleanup
        self._wall_clock = wall_clock

    async def transcribe(
        self,
        media_path: Path,
        bucket: str,
        output_file: Path | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> TranscriptionOutcome:
        """Run the full workflow for `media_path` using `bucket` as scratch storage."""

        if self._verify_credentials and isinstance(self._object_store, CredentialsVerifier):
            await self._object_store.verify_credentials()
            logger.info("AWS credentials validated successfully.")

        size = self._validate_media(media_path)
        timestamp = self._wall_clock()
        key = generate_s3_key(media_path, self._key_prefix, timestamp)
        tracker = ProgressTracker(
            size,
            media_path.name,
            self._progress_sink,
            fallback_sink=self._fallback_progress_sink,
        )

        logger.info("Uploading file to s3://%s/%s; it will be deleted at the end.", bucket, key)
        handle = await self._uploader.upload_file(media_path, bucket, key, tracker)

        async with self._temporary_object(handle):
            job_name = generate_job_name(media_path, timestamp)
            job = await self._job_service.submit(handle.uri, job_name)
            result_locator = await self._job_poller.wait_for_completion(job, cancel_event)
            text = await self._result_fetcher.fetch(result_locator)
            if output_file is not None:
                logger.info("Saving transcription to %s.", output_file)
                self._save_transcript(output_file, text)

        return TranscriptionOutcome(
            text=text,
            job_name=job.job_name,
            media_uri=handle.uri,
            result_locator=result_locator,
            output_file=output_file,
        )

    @asynccontextmanager
    async def _temporary_object(self, handle: TransferHandle) -> AsyncIterator[TransferHandle]:
        """Delete `handle` when the block exits, whatever the outcome."""

        try:
            yield handle
        except BaseException:
            try:
                await self._object_store.delete_object(handle.bucket, handle.key)
            except Exception as exc:  # noqa: BLE001
                self._warn_cleanup_failure(handle, exc)
            else:
                logger.info("Deleted temporary object %s.", handle.uri)
            raise

        try:
            await self._object_store.delete_object(handle.bucket, handle.key)
        except Exception as exc:  # noqa: BLE001
            if self._strict_cleanup:
                raise CleanupError(
                    f"Failed to delete temporary object {handle.uri}: {exc}"
                ) from exc
            self._warn_cleanup_failure(handle, exc)
            return
        logger.info("Deleted temporary object %s.", handle.uri)

    def _warn_cleanup_failure(self, handle: TransferHandle, exc: Exception) -> None:
        logger.warning(
            "Failed to delete temporary object %s, please do so manually: %s",
            handle.uri,
            exc,
        )


__all__ = ["TranscriptionOutcome", "TranscriptionService"]
