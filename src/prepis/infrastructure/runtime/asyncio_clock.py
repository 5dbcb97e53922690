"""Event-loop clock with cancellable sleep."""

from __future__ import annotations

import asyncio
import time


class AsyncioClock:
    """Clock backed by `time.monotonic` and `asyncio` waits."""

    def monotonic(self) -> float:
        return time.monotonic()

    async def sleep(self, seconds: float, cancel_event: asyncio.Event | None = None) -> bool:
        """Sleep for `seconds`; return True as soon as `cancel_event` is set."""

        if cancel_event is None:
            await asyncio.sleep(max(seconds, 0.0))
            return False
        if cancel_event.is_set():
            return True

        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=max(seconds, 0.0))
        except TimeoutError:
            return False
        return True


__all__ = ["AsyncioClock"]
