"""Remote transcription job lifecycle models."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from prepis.domain.errors import InvalidJobTransitionError

DEFAULT_POLL_MIN_INTERVAL_SECONDS = 5.0
DEFAULT_POLL_MAX_INTERVAL_SECONDS = 30.0
DEFAULT_POLL_GROWTH_FACTOR = 1.5
DEFAULT_POLL_MAX_ATTEMPTS = 120


class JobStatus(StrEnum):
    """Supported remote job statuses."""

    QUEUED = "QUEUED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


TERMINAL_JOB_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED})


@dataclass(slots=True, frozen=True)
class JobHandle:
    """Identifier of one submitted transcription job."""

    job_name: str

    def __str__(self) -> str:
        return self.job_name


@dataclass(slots=True, frozen=True)
class JobState:
    """Observed job state.

    Completed states always carry a result locator and failed states always
    carry a reason; use the factory classmethods to build them.
    """

    status: JobStatus
    result_locator: str | None = None
    failure_reason: str | None = None

    def __post_init__(self) -> None:
        if self.status is JobStatus.COMPLETED and not self.result_locator:
            raise ValueError("Completed job state requires a result locator.")
        if self.status is JobStatus.FAILED and not self.failure_reason:
            raise ValueError("Failed job state requires a failure reason.")
        if self.status is not JobStatus.COMPLETED and self.result_locator is not None:
            raise ValueError("Only completed job states carry a result locator.")
        if self.status is not JobStatus.FAILED and self.failure_reason is not None:
            raise ValueError("Only failed job states carry a failure reason.")

    @classmethod
    def queued(cls) -> JobState:
        return cls(status=JobStatus.QUEUED)

    @classmethod
    def in_progress(cls) -> JobState:
        return cls(status=JobStatus.IN_PROGRESS)

    @classmethod
    def completed(cls, result_locator: str) -> JobState:
        return cls(status=JobStatus.COMPLETED, result_locator=result_locator)

    @classmethod
    def failed(cls, reason: str) -> JobState:
        return cls(status=JobStatus.FAILED, failure_reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_JOB_STATUSES

    def transition(self, observed: JobState) -> JobState:
        """Return the state after observing `observed`.

        States only move forward: a job that has started cannot go back to
        queued, and terminal states only accept an identical observation.
        """

        if not self.is_terminal:
            if self.status is JobStatus.IN_PROGRESS and observed.status is JobStatus.QUEUED:
                raise InvalidJobTransitionError(
                    f"Job state cannot change from {self.status} to {observed.status}."
                )
            return observed
        if observed == self:
            return self
        raise InvalidJobTransitionError(
            f"Job state cannot change from {self.status} to {observed.status}."
        )


@dataclass(slots=True, frozen=True)
class PollSchedule:
    """Bounded exponential backoff for status polling."""

    min_interval: float = DEFAULT_POLL_MIN_INTERVAL_SECONDS
    max_interval: float = DEFAULT_POLL_MAX_INTERVAL_SECONDS
    growth_factor: float = DEFAULT_POLL_GROWTH_FACTOR
    max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS

    def __post_init__(self) -> None:
        if self.min_interval <= 0:
            raise ValueError("Poll min interval must be > 0.")
        if self.max_interval < self.min_interval:
            raise ValueError("Poll max interval must be >= min interval.")
        if self.growth_factor < 1.0:
            raise ValueError("Poll growth factor must be >= 1.0.")
        if self.max_attempts < 1:
            raise ValueError("Poll max attempts must be >= 1.")

    def next_interval(self, current: float) -> float:
        """Grow `current` by the growth factor without passing the cap."""

        return min(current * self.growth_factor, self.max_interval)

    def intervals(self) -> Iterator[float]:
        """Yield the sleep before each retry, one per attempt after the first."""

        interval = self.min_interval
        for _ in range(self.max_attempts - 1):
            yield interval
            interval = self.next_interval(interval)


__all__ = [
    "DEFAULT_POLL_GROWTH_FACTOR",
    "DEFAULT_POLL_MAX_ATTEMPTS",
    "DEFAULT_POLL_MAX_INTERVAL_SECONDS",
    "DEFAULT_POLL_MIN_INTERVAL_SECONDS",
    "JobHandle",
    "JobState",
    "JobStatus",
    "PollSchedule",
    "TERMINAL_JOB_STATUSES",
]
