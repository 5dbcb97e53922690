from __future__ import annotations

import asyncio
import io
import threading
from concurrent.futures import ThreadPoolExecutor

from prepis.application.services import ProgressTracker, Uploader
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot
from prepis.domain.transfer_types import TransferHandle


class RecordingSink:
    """Progress sink that keeps every call for assertions."""

    def __init__(self) -> None:
        self.rendered: list[ProgressSnapshot] = []
        self.finished: list[tuple[ProgressSnapshot, ProgressOutcome]] = []
        self._lock = threading.Lock()

    def render(self, snapshot: ProgressSnapshot) -> None:
        with self._lock:
            self.rendered.append(snapshot)

    def finish(self, snapshot: ProgressSnapshot, outcome: ProgressOutcome) -> None:
        self.finished.append((snapshot, outcome))


class BrokenSink:
    def __init__(self) -> None:
        self.render_calls = 0

    def render(self, snapshot: ProgressSnapshot) -> None:
        self.render_calls += 1
        raise OSError("not a terminal")

    def finish(self, snapshot: ProgressSnapshot, outcome: ProgressOutcome) -> None:
        raise OSError("not a terminal")


class ManualClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


def test_concurrent_advances_are_not_lost() -> None:
    sink = RecordingSink()
    tracker = ProgressTracker(None, "talk.mp4", sink)
    deltas = [(index % 7) + 1 for index in range(2000)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(tracker.advance, deltas))

    assert tracker.snapshot().bytes_done == sum(deltas)
    rendered = [snapshot.bytes_done for snapshot in sink.rendered]
    assert rendered == sorted(rendered)
    assert rendered[-1] == sum(deltas)


def test_snapshot_derives_percent_rate_and_eta() -> None:
    clock = ManualClock()
    tracker = ProgressTracker(1000, "talk.mp4", RecordingSink(), monotonic=clock)

    clock.now += 2.0
    tracker.advance(200)
    snapshot = tracker.snapshot()

    assert snapshot.bytes_total == 1000
    assert snapshot.bytes_done == 200
    assert snapshot.elapsed == 2.0
    assert snapshot.percent_complete == 20.0
    assert snapshot.instantaneous_rate == 100.0
    assert snapshot.eta_seconds == 8.0


def test_snapshot_is_recomputed_on_each_call() -> None:
    clock = ManualClock()
    tracker = ProgressTracker(1000, "talk.mp4", RecordingSink(), monotonic=clock)
    tracker.advance(100)

    first = tracker.snapshot()
    clock.now += 5.0
    second = tracker.snapshot()

    assert second.elapsed == first.elapsed + 5.0
    assert second.bytes_done == first.bytes_done


def test_indeterminate_mode_has_no_percent_or_eta() -> None:
    tracker = ProgressTracker(None, "stream", RecordingSink())
    tracker.advance(4096)
    snapshot = tracker.snapshot()

    assert snapshot.indeterminate is True
    assert snapshot.percent_complete is None
    assert snapshot.eta_seconds is None
    assert snapshot.bytes_done == 4096


def test_finish_is_idempotent() -> None:
    sink = RecordingSink()
    tracker = ProgressTracker(10, "talk.mp4", sink)
    tracker.advance(10)

    tracker.finish(ProgressOutcome.SUCCESS)
    tracker.finish(ProgressOutcome.ABORTED)
    tracker.advance(1)

    assert len(sink.finished) == 1
    assert sink.finished[0][1] is ProgressOutcome.SUCCESS
    assert sink.finished[0][0].bytes_done == 10
    assert tracker.finished is True
    assert len(sink.rendered) == 1


def test_start_renders_initial_snapshot_once() -> None:
    sink = RecordingSink()
    tracker = ProgressTracker(10, "talk.mp4", sink)

    tracker.start()
    tracker.start()

    assert [snapshot.bytes_done for snapshot in sink.rendered] == [0]


def test_negative_advance_is_rejected() -> None:
    tracker = ProgressTracker(10, "talk.mp4", RecordingSink())

    try:
        tracker.advance(-1)
    except ValueError:
        pass
    else:  # pragma: no cover
        raise AssertionError("negative advance accepted")
    assert tracker.snapshot().bytes_done == 0


def test_render_failure_switches_to_fallback_sink() -> None:
    broken = BrokenSink()
    fallback = RecordingSink()
    tracker = ProgressTracker(100, "talk.mp4", broken, fallback_sink=fallback)

    tracker.advance(10)
    tracker.advance(20)
    tracker.finish(ProgressOutcome.SUCCESS)

    assert broken.render_calls == 1
    assert [snapshot.bytes_done for snapshot in fallback.rendered] == [10, 30]
    assert fallback.finished[0][1] is ProgressOutcome.SUCCESS


def test_render_failure_without_fallback_never_raises() -> None:
    broken = BrokenSink()
    tracker = ProgressTracker(100, "talk.mp4", broken)

    tracker.advance(10)
    tracker.advance(20)
    tracker.finish(ProgressOutcome.ABORTED)

    assert broken.render_calls == 1
    assert tracker.snapshot().bytes_done == 30


class WholeObjectStore:
    """Object store accepting single-request uploads only."""

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], bytes] = {}

    async def put_object(self, bucket: str, key: str, body: bytes) -> None:
        self.objects[(bucket, key)] = body


def test_failing_fallback_sink_does_not_fail_upload() -> None:
    primary = BrokenSink()
    fallback = BrokenSink()
    tracker = ProgressTracker(4096, "talk.mp4", primary, fallback_sink=fallback)
    store = WholeObjectStore()
    uploader = Uploader(store)

    async def scenario() -> TransferHandle:
        return await uploader.upload(
            io.BytesIO(b"v" * 4096),
            "scratch",
            "talk.mp4",
            size=4096,
            tracker=tracker,
        )

    handle = asyncio.run(scenario())

    assert handle == TransferHandle(bucket="scratch", key="talk.mp4")
    assert store.objects[("scratch", "talk.mp4")] == b"v" * 4096
    assert primary.render_calls == 1
    assert fallback.render_calls == 1
    assert tracker.finished is True
    assert tracker.snapshot().bytes_done == 4096


def test_failing_fallback_finish_is_swallowed() -> None:
    primary = BrokenSink()
    fallback = BrokenSink()
    tracker = ProgressTracker(10, "talk.mp4", primary, fallback_sink=fallback)

    tracker.finish(ProgressOutcome.ABORTED)

    assert tracker.finished is True
