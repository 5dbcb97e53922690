from __future__ import annotations

import asyncio

from prepis.infrastructure.runtime import AsyncioClock


def test_sleep_without_event_completes() -> None:
    clock = AsyncioClock()

    assert asyncio.run(clock.sleep(0.01)) is False


def test_sleep_times_out_when_event_is_not_set() -> None:
    clock = AsyncioClock()

    async def scenario() -> bool:
        return await clock.sleep(0.01, asyncio.Event())

    assert asyncio.run(scenario()) is False


def test_sleep_returns_immediately_for_set_event() -> None:
    clock = AsyncioClock()

    async def scenario() -> bool:
        cancel_event = asyncio.Event()
        cancel_event.set()
        return await clock.sleep(60.0, cancel_event)

    assert asyncio.run(scenario()) is True


def test_sleep_wakes_when_event_is_set() -> None:
    clock = AsyncioClock()

    async def scenario() -> tuple[bool, float]:
        cancel_event = asyncio.Event()
        asyncio.get_running_loop().call_later(0.02, cancel_event.set)
        started = clock.monotonic()
        cancelled = await clock.sleep(60.0, cancel_event)
        return cancelled, clock.monotonic() - started

    cancelled, elapsed = asyncio.run(scenario())

    assert cancelled is True
    assert elapsed < 5.0
