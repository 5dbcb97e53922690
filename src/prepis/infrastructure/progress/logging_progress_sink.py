"""Plain-text progress sink for non-interactive output."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from prepis.domain.ports import ProgressSink
from prepis.domain.progress_models import ProgressOutcome, ProgressSnapshot

_MIB = 1024 * 1024

logger = logging.getLogger(__name__)


class LoggingProgressSink(ProgressSink):
    """Emit progress as log lines, at most once per `interval_seconds`."""

    def __init__(
        self,
        interval_seconds: float = 5.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._interval_seconds = max(interval_seconds, 0.0)
        self._monotonic = monotonic
        self._last_emitted_at: float | None = None

    def render(self, snapshot: ProgressSnapshot) -> None:
        now = self._monotonic()
        if (
            self._last_emitted_at is not None
            and now - self._last_emitted_at < self._interval_seconds
        ):
            return
        self._last_emitted_at = now
        logger.info("Uploading %s: %s", snapshot.label, format_progress_line(snapshot))

    def finish(self, snapshot: ProgressSnapshot, outcome: ProgressOutcome) -> None:
        if outcome is ProgressOutcome.SUCCESS:
            logger.info(
                "%s uploaded successfully in %.1fs (%s).",
                snapshot.label,
                snapshot.elapsed,
                _format_bytes(snapshot.bytes_done),
            )
            return
        logger.warning(
            "Upload of %s was interrupted after %s.",
            snapshot.label,
            _format_bytes(snapshot.bytes_done),
        )


def format_progress_line(snapshot: ProgressSnapshot) -> str:
    """Render a one-line textual progress summary."""

    rate = snapshot.instantaneous_rate or snapshot.average_rate
    if snapshot.bytes_total is None:
        return (
            f"{_format_bytes(snapshot.bytes_done)} after {snapshot.elapsed:.1f}s "
            f"({_format_bytes(int(rate))}/s)"
        )

    eta = snapshot.eta_seconds
    eta_text = "unknown" if eta is None else f"{eta:.0f}s"
    return (
        f"{_format_bytes(snapshot.bytes_done)}/{_format_bytes(snapshot.bytes_total)} "
        f"({snapshot.percent_complete:.1f}%, {_format_bytes(int(rate))}/s, ETA {eta_text})"
    )


def _format_bytes(value: int) -> str:
    if value >= _MIB:
        return f"{value / _MIB:.2f} MiB"
    if value >= 1024:
        return f"{value / 1024:.1f} KiB"
    return f"{value} B"


__all__ = ["LoggingProgressSink", "format_progress_line"]
