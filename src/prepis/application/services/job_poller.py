"""Bounded exponential-backoff polling of remote transcription jobs."""

from __future__ import annotations

import asyncio
import logging

from prepis.domain.errors import (
    PollCancelledError,
    PollTimeoutError,
    RemoteJobFailedError,
)
from prepis.domain.job_states import JobHandle, JobState, JobStatus, PollSchedule
from prepis.domain.ports import Clock, JobService

logger = logging.getLogger(__name__)


class JobPoller:
    """Drive a submitted job to a terminal state.

    Each attempt queries the job once. Between non-terminal observations the
    poller sleeps on the clock, waking early when `cancel_event` is set. After
    `max_attempts` non-terminal observations polling stops with
    `PollTimeoutError`.
    """

    def __init__(
        self,
        job_service: JobService,
        clock: Clock,
        schedule: PollSchedule | None = None,
    ) -> None:
        self._job_service = job_service
        self._clock = clock
        self._schedule = schedule or PollSchedule()

    @property
    def schedule(self) -> PollSchedule:
        return self._schedule

    async def poll_until_terminal(
        self,
        handle: JobHandle,
        cancel_event: asyncio.Event | None = None,
    ) -> JobState:
        """Return the first terminal state (completed or failed) of `handle`."""

        schedule = self._schedule
        state = JobState.queued()
        interval = schedule.min_interval

        for attempt in range(1, schedule.max_attempts + 1):
            if cancel_event is not None and cancel_event.is_set():
                raise PollCancelledError(f"Polling of job '{handle}' was cancelled.")

            logger.info(
                "Checking status of job '%s' (attempt %s/%s).",
                handle,
                attempt,
                schedule.max_attempts,
            )
            state = state.transition(await self._job_service.get_status(handle))
            if state.is_terminal:
                logger.info("Job '%s' finished with status %s.", handle, state.status)
                return state

            if attempt == schedule.max_attempts:
                break

            logger.info(
                "Job '%s' is %s; waiting %.1f seconds before next check.",
                handle,
                state.status,
                interval,
            )
            if await self._clock.sleep(interval, cancel_event):
                raise PollCancelledError(f"Polling of job '{handle}' was cancelled.")
            interval = schedule.next_interval(interval)

        raise PollTimeoutError(handle.job_name, schedule.max_attempts)

    async def wait_for_completion(
        self,
        handle: JobHandle,
        cancel_event: asyncio.Event | None = None,
    ) -> str:
        """Return the result locator, raising `RemoteJobFailedError` on failure."""

        state = await self.poll_until_terminal(handle, cancel_event)
        if state.status is JobStatus.FAILED:
            assert state.failure_reason is not None
            raise RemoteJobFailedError(handle.job_name, state.failure_reason)

        assert state.result_locator is not None
        return state.result_locator


__all__ = ["JobPoller"]
