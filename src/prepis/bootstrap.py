"""Application bootstrap/wiring."""

import logging
from dataclasses import dataclass

from rich.console import Console

from prepis.application.services import (
    JobPoller,
    ResultFetcher,
    TranscriptionService,
    Uploader,
)
from prepis.config import ProgressMode, Settings
from prepis.domain.job_states import PollSchedule
from prepis.domain.ports import Clock, JobService, ObjectStore, ProgressSink, ResultStore
from prepis.domain.transfer_types import MIB, TransferStrategy
from prepis.infrastructure.files import save_transcription, validate_media_file
from prepis.infrastructure.jobs import TranscribeJobService
from prepis.infrastructure.progress import (
    LoggingProgressSink,
    NoopProgressSink,
    RichProgressSink,
)
from prepis.infrastructure.results import HttpResultStore
from prepis.infrastructure.runtime import AsyncioClock
from prepis.infrastructure.storage import S3ObjectStore

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class _ProgressWiring:
    sink: ProgressSink
    fallback: ProgressSink | None


def build_progress_sinks(settings: Settings, console: Console) -> _ProgressWiring:
    """Select the progress display for the configured mode and terminal."""

    log_sink = LoggingProgressSink(interval_seconds=settings.progress_log_interval_seconds)
    mode = settings.progress_mode

    if mode is ProgressMode.NONE:
        return _ProgressWiring(sink=NoopProgressSink(), fallback=None)
    if mode is ProgressMode.LOG:
        return _ProgressWiring(sink=log_sink, fallback=None)
    if mode is ProgressMode.AUTO and not console.is_terminal:
        logger.debug("Output is not a terminal; using plain-text progress.")
        return _ProgressWiring(sink=log_sink, fallback=None)
    return _ProgressWiring(sink=RichProgressSink(console), fallback=log_sink)


def build_poll_schedule(settings: Settings) -> PollSchedule:
    """Map polling settings to a `PollSchedule`."""

    return PollSchedule(
        min_interval=settings.poll_min_interval_seconds,
        max_interval=settings.poll_max_interval_seconds,
        growth_factor=settings.poll_growth_factor,
        max_attempts=settings.poll_max_attempts,
    )


def build_transcription_service(
    settings: Settings,
    *,
    console: Console | None = None,
    object_store: ObjectStore | None = None,
    job_service: JobService | None = None,
    result_store: ResultStore | None = None,
    clock: Clock | None = None,
) -> TranscriptionService:
    """Wire the transcription workflow from settings.

    Adapters default to AWS-backed implementations; tests pass fakes.
    """

    resolved_object_store = object_store or S3ObjectStore(region=settings.aws_region)
    resolved_job_service = job_service or TranscribeJobService(
        region=settings.aws_region,
        language_code=settings.language_code,
    )
    resolved_result_store = result_store or HttpResultStore(
        timeout_seconds=settings.result_fetch_timeout_seconds,
    )
    progress = build_progress_sinks(settings, console or Console(stderr=True))
    max_object_size_bytes = settings.max_object_size_mb * MIB

    uploader = Uploader(
        resolved_object_store,
        TransferStrategy(
            threshold_bytes=settings.multipart_threshold_mb * MIB,
            chunk_size_bytes=settings.multipart_part_size_mb * MIB,
        ),
        max_object_size_bytes=max_object_size_bytes,
        concurrency=settings.multipart_concurrency,
    )
    job_poller = JobPoller(
        resolved_job_service,
        clock or AsyncioClock(),
        build_poll_schedule(settings),
    )

    return TranscriptionService(
        object_store=resolved_object_store,
        uploader=uploader,
        job_service=resolved_job_service,
        job_poller=job_poller,
        result_fetcher=ResultFetcher(resolved_result_store),
        progress_sink=progress.sink,
        fallback_progress_sink=progress.fallback,
        validate_media=lambda path: validate_media_file(path, max_object_size_bytes),
        save_transcript=save_transcription,
        key_prefix=settings.s3_key_prefix,
        verify_credentials=settings.verify_credentials,
        strict_cleanup=settings.strict_cleanup,
    )


__all__ = ["build_poll_schedule", "build_progress_sinks", "build_transcription_service"]
