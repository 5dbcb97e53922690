from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from prepis.application.services import (
    JobPoller,
    ResultFetcher,
    TranscriptionService,
    Uploader,
)
from prepis.domain.errors import (
    CleanupError,
    CredentialsError,
    MediaValidationError,
    PollTimeoutError,
    RemoteJobFailedError,
)
from prepis.domain.job_states import JobHandle, JobState, PollSchedule
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot
from prepis.domain.transfer_types import CompletedPart, MultipartSession, TransferStrategy
from prepis.infrastructure.files import save_transcription, validate_media_file
from prepis.infrastructure.runtime import AsyncioClock

RESULT_URI = "https://s3.amazonaws.com/results/talk.json"
RESULT_BODY = b'{"results": {"transcripts": [{"transcript": "hello world"}]}}'


class FakeObjectStore:
    def __init__(self, fail_delete: bool = False, fail_credentials: bool = False) -> None:
        self._fail_delete = fail_delete
        self._fail_credentials = fail_credentials
        self.objects: dict[tuple[str, str], bytes] = {}
        self.events: list[str] = []

    async def verify_credentials(self) -> None:
        self.events.append("verify_credentials")
        if self._fail_credentials:
            raise CredentialsError("Failed to validate AWS credentials: expired token")

    async def put_object(self, bucket: str, key: str, body: bytes) -> None:
        self.events.append(f"put:{key}")
        self.objects[(bucket, key)] = body

    async def create_multipart(self, bucket: str, key: str) -> MultipartSession:
        raise AssertionError("small media should not use multipart upload")

    async def upload_part(
        self,
        session: MultipartSession,
        part_number: int,
        body: bytes,
    ) -> CompletedPart:
        raise AssertionError("small media should not use multipart upload")

    async def complete_multipart(
        self,
        session: MultipartSession,
        parts: list[CompletedPart],
    ) -> None:
        raise AssertionError("small media should not use multipart upload")

    async def abort_multipart(self, session: MultipartSession) -> None:
        raise AssertionError("small media should not use multipart upload")

    async def delete_object(self, bucket: str, key: str) -> None:
        self.events.append(f"delete:{key}")
        if self._fail_delete:
            raise RuntimeError("AccessDenied")
        self.objects.pop((bucket, key), None)


class FakeJobService:
    def __init__(self, states: list[JobState]) -> None:
        self._states = list(states)
        self.submitted: list[tuple[str, str]] = []

    async def submit(self, source_locator: str, job_name: str) -> JobHandle:
        self.submitted.append((source_locator, job_name))
        return JobHandle(job_name=job_name)

    async def get_status(self, handle: JobHandle) -> JobState:
        if len(self._states) > 1:
            return self._states.pop(0)
        return self._states[0]


class FakeResultStore:
    async def get(self, result_locator: str) -> bytes:
        assert result_locator == RESULT_URI
        return RESULT_BODY


class InstantClock:
    def monotonic(self) -> float:
        return 0.0

    async def sleep(self, seconds: float, cancel_event: asyncio.Event | None = None) -> bool:
        return False


class RecordingSink:
    def __init__(self) -> None:
        self.outcomes: list[ProgressOutcome] = []

    def render(self, snapshot: ProgressSnapshot) -> None:
        return None

    def finish(self, snapshot: ProgressSnapshot, outcome: ProgressOutcome) -> None:
        self.outcomes.append(outcome)


def _build_service(
    store: FakeObjectStore,
    job_service: FakeJobService,
    *,
    sink: RecordingSink | None = None,
    strict_cleanup: bool = False,
    max_attempts: int = 5,
    clock: InstantClock | AsyncioClock | None = None,
) -> TranscriptionService:
    return TranscriptionService(
        object_store=store,
        uploader=Uploader(store, TransferStrategy()),
        job_service=job_service,
        job_poller=JobPoller(
            job_service,
            clock or InstantClock(),
            PollSchedule(max_attempts=max_attempts),
        ),
        result_fetcher=ResultFetcher(FakeResultStore()),
        progress_sink=sink or RecordingSink(),
        validate_media=validate_media_file,
        save_transcript=save_transcription,
        strict_cleanup=strict_cleanup,
        wall_clock=lambda: 1700000000.0,
    )


def _media(tmp_path: Path) -> Path:
    media = tmp_path / "talk.mp4"
    media.write_bytes(b"m" * 1024)
    return media


def test_transcribe_uploads_submits_fetches_and_cleans_up(tmp_path: Path) -> None:
    store = FakeObjectStore()
    job_service = FakeJobService(
        [JobState.queued(), JobState.in_progress(), JobState.completed(RESULT_URI)]
    )
    sink = RecordingSink()
    service = _build_service(store, job_service, sink=sink)

    outcome = asyncio.run(service.transcribe(_media(tmp_path), "scratch"))

    key = "transcribe-temp/1700000000-talk.mp4"
    assert outcome.text == "hello world"
    assert outcome.job_name == "transcribe-job-1700000000-talk"
    assert outcome.media_uri == f"s3://scratch/{key}"
    assert outcome.result_locator == RESULT_URI
    assert outcome.output_file is None
    assert job_service.submitted == [(f"s3://scratch/{key}", "transcribe-job-1700000000-talk")]
    assert store.events == ["verify_credentials", f"put:{key}", f"delete:{key}"]
    assert store.objects == {}
    assert sink.outcomes == [ProgressOutcome.SUCCESS]


def test_transcribe_saves_output_file(tmp_path: Path) -> None:
    output = tmp_path / "talk.txt"
    service = _build_service(FakeObjectStore(), FakeJobService([JobState.completed(RESULT_URI)]))

    outcome = asyncio.run(service.transcribe(_media(tmp_path), "scratch", output))

    assert outcome.output_file == output
    assert output.read_text(encoding="utf-8") == "hello world"


def test_invalid_media_stops_before_upload(tmp_path: Path) -> None:
    store = FakeObjectStore()
    service = _build_service(store, FakeJobService([JobState.completed(RESULT_URI)]))
    media = tmp_path / "notes.txt"
    media.write_text("not media")

    with pytest.raises(MediaValidationError):
        asyncio.run(service.transcribe(media, "scratch"))

    assert store.events == ["verify_credentials"]


def test_credential_failure_stops_before_validation(tmp_path: Path) -> None:
    store = FakeObjectStore(fail_credentials=True)
    service = _build_service(store, FakeJobService([JobState.completed(RESULT_URI)]))

    with pytest.raises(CredentialsError):
        asyncio.run(service.transcribe(tmp_path / "missing.mp4", "scratch"))

    assert store.events == ["verify_credentials"]


def test_remote_failure_still_deletes_uploaded_object(tmp_path: Path) -> None:
    store = FakeObjectStore()
    service = _build_service(store, FakeJobService([JobState.failed("Invalid media")]))

    with pytest.raises(RemoteJobFailedError, match="Invalid media"):
        asyncio.run(service.transcribe(_media(tmp_path), "scratch"))

    assert store.events[-1] == "delete:transcribe-temp/1700000000-talk.mp4"
    assert store.objects == {}


def test_poll_timeout_still_deletes_uploaded_object(tmp_path: Path) -> None:
    store = FakeObjectStore()
    service = _build_service(store, FakeJobService([JobState.in_progress()]), max_attempts=3)

    with pytest.raises(PollTimeoutError):
        asyncio.run(service.transcribe(_media(tmp_path), "scratch"))

    assert store.objects == {}


def test_delete_failure_after_success_only_warns(
    tmp_path: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    store = FakeObjectStore(fail_delete=True)
    service = _build_service(store, FakeJobService([JobState.completed(RESULT_URI)]))

    with caplog.at_level("WARNING"):
        outcome = asyncio.run(service.transcribe(_media(tmp_path), "scratch"))

    assert outcome.text == "hello world"
    assert "please do so manually" in caplog.text


def test_delete_failure_in_strict_mode_raises(tmp_path: Path) -> None:
    store = FakeObjectStore(fail_delete=True)
    service = _build_service(
        store,
        FakeJobService([JobState.completed(RESULT_URI)]),
        strict_cleanup=True,
    )

    with pytest.raises(CleanupError, match="AccessDenied"):
        asyncio.run(service.transcribe(_media(tmp_path), "scratch"))


def test_delete_failure_does_not_mask_workflow_error(tmp_path: Path) -> None:
    store = FakeObjectStore(fail_delete=True)
    service = _build_service(
        store,
        FakeJobService([JobState.failed("Invalid media")]),
        strict_cleanup=True,
    )

    with pytest.raises(RemoteJobFailedError):
        asyncio.run(service.transcribe(_media(tmp_path), "scratch"))


def test_cancelled_transcription_still_deletes_uploaded_object(tmp_path: Path) -> None:
    store = FakeObjectStore()
    job_service = FakeJobService([JobState.in_progress()])
    sink = RecordingSink()
    service = _build_service(store, job_service, sink=sink, clock=AsyncioClock())
    media = _media(tmp_path)

    async def scenario() -> None:
        task = asyncio.create_task(service.transcribe(media, "scratch"))
        while not job_service.submitted:
            await asyncio.sleep(0.01)
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(scenario())

    key = "transcribe-temp/1700000000-talk.mp4"
    assert store.events[-1] == f"delete:{key}"
    assert store.objects == {}
    assert sink.outcomes == [ProgressOutcome.SUCCESS]
