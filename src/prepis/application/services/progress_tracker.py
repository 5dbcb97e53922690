"""Thread-safe byte progress accumulator."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from prepis.domain.ports import ProgressSink
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot

logger = logging.getLogger(__name__)


class ProgressTracker:
    """Accumulate transferred bytes and forward snapshots to a sink.

    `advance` may be called from worker threads; all counter updates and sink
    calls happen under one lock so no increment is lost and snapshots reach
    the sink in order. Sink failures never propagate: the tracker switches to
    `fallback_sink` (or stops rendering when none is configured).
    """

    def __init__(
        self,
        total_size: int | None,
        label: str,
        sink: ProgressSink,
        *,
        fallback_sink: ProgressSink | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if total_size is not None and total_size < 0:
            raise ValueError("Total size must be >= 0.")
        self._total_size = total_size
        self._label = label
        self._sink: ProgressSink | None = sink
        self._fallback_sink = fallback_sink
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._started_at = monotonic()
        self._bytes_done = 0
        self._last_delta = 0
        self._previous_sample_at = self._started_at
        self._last_sample_at = self._started_at
        self._started = False
        self._finished = False

    @property
    def label(self) -> str:
        return self._label

    @property
    def finished(self) -> bool:
        return self._finished

    def start(self) -> None:
        """Render the initial zero-byte snapshot once."""

        with self._lock:
            if self._started or self._finished:
                return
            self._started = True
            self._render(self._snapshot_at(self._monotonic()))

    def advance(self, delta_bytes: int) -> None:
        """Add `delta_bytes` to the transferred byte count."""

        if delta_bytes < 0:
            raise ValueError("Progress can only move forward.")
        if delta_bytes == 0:
            return

        with self._lock:
            now = self._monotonic()
            self._bytes_done += delta_bytes
            self._last_delta = delta_bytes
            self._previous_sample_at = self._last_sample_at
            self._last_sample_at = now
            self._started = True
            if self._finished:
                return
            self._render(self._snapshot_at(now))

    def snapshot(self) -> ProgressSnapshot:
        """Return a fresh snapshot computed from the current counters."""

        with self._lock:
            return self._snapshot_at(self._monotonic())

    def finish(self, outcome: ProgressOutcome) -> None:
        """Emit the final line once; later calls do nothing."""

        with self._lock:
            if self._finished:
                return
            self._finished = True
            snapshot = self._snapshot_at(self._monotonic())
            sink = self._sink
            self._sink = None
            if sink is None:
                return
            try:
                sink.finish(snapshot, outcome)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Progress display for '%s' failed to finish: %s", self._label, exc)
                fallback = self._fallback_sink
                if fallback is not None and fallback is not sink:
                    try:
                        fallback.finish(snapshot, outcome)
                    except Exception as fallback_exc:  # noqa: BLE001
                        logger.warning(
                            "Fallback progress display for '%s' failed to finish: %s",
                            self._label,
                            fallback_exc,
                        )

    def _snapshot_at(self, now: float) -> ProgressSnapshot:
        window = now - self._previous_sample_at
        rate = self._last_delta / window if window > 0 else 0.0
        return ProgressSnapshot(
            label=self._label,
            bytes_total=self._total_size,
            bytes_done=self._bytes_done,
            elapsed=max(now - self._started_at, 0.0),
            instantaneous_rate=rate,
        )

    def _render(self, snapshot: ProgressSnapshot) -> None:
        sink = self._sink
        if sink is None:
            return
        try:
            sink.render(snapshot)
        except Exception as exc:  # noqa: BLE001
            fallback = self._fallback_sink
            if fallback is None or fallback is sink:
                logger.warning(
                    "Progress display for '%s' failed: %s. Progress rendering disabled.",
                    self._label,
                    exc,
                )
                self._sink = None
                return
            logger.warning(
                "Progress display for '%s' failed: %s. Falling back to log output.",
                self._label,
                exc,
            )
            self._sink = fallback
            try:
                fallback.render(snapshot)
            except Exception as fallback_exc:  # noqa: BLE001
                logger.warning(
                    "Fallback progress display for '%s' failed: %s. Progress rendering disabled.",
                    self._label,
                    fallback_exc,
                )
                self._sink = None


__all__ = ["ProgressTracker"]
