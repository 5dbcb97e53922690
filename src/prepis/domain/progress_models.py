"""Upload progress models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ProgressOutcome(StrEnum):
    """How a tracked transfer ended."""

    SUCCESS = "SUCCESS"
    ABORTED = "ABORTED"


@dataclass(slots=True, frozen=True)
class ProgressSnapshot:
    """Point-in-time view of one tracked transfer."""

    label: str
    bytes_total: int | None
    bytes_done: int = 0
    elapsed: float = 0.0
    instantaneous_rate: float = 0.0

    @property
    def indeterminate(self) -> bool:
        return self.bytes_total is None

    @property
    def percent_complete(self) -> float | None:
        """Return completion ratio in percent when total size is known."""

        if self.bytes_total is None:
            return None
        if self.bytes_total <= 0:
            return 100.0
        ratio = (self.bytes_done / self.bytes_total) * 100
        return max(0.0, min(100.0, round(ratio, 2)))

    @property
    def average_rate(self) -> float:
        if self.elapsed <= 0:
            return 0.0
        return self.bytes_done / self.elapsed

    @property
    def eta_seconds(self) -> float | None:
        """Return the estimated remaining time, or None when it cannot be derived."""

        if self.bytes_total is None:
            return None
        remaining = max(self.bytes_total - self.bytes_done, 0)
        if remaining == 0:
            return 0.0
        rate = self.instantaneous_rate or self.average_rate
        if rate <= 0:
            return None
        return remaining / rate


__all__ = ["ProgressOutcome", "ProgressSnapshot"]
