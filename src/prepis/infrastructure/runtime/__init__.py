"""Runtime helpers for time and sleeping."""

from prepis.infrastructure.runtime.asyncio_clock import AsyncioClock

__all__ = ["AsyncioClock"]
