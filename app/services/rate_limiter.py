"""Minimum-interval pacing for outbound TMDB requests."""

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable


class RateLimiter:
    """Grant one request slot at a time, spaced by a fixed minimum interval.

    This is not a token bucket: burst capacity is exactly one. A single
    instance is shared by every caller that talks to the same provider.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._min_interval = max(min_interval, 0.0)
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()
        self._last_grant: float | None = None

    @property
    def min_interval(self) -> float:
        return self._min_interval

    async def wait_for_slot(self) -> None:
        """Suspend until the minimum interval since the previous grant has passed."""

        async with self._lock:
            if self._last_grant is not None:
                remaining = self._min_interval - (self._clock() - self._last_grant)
                if remaining > 0:
                    await self._sleep(remaining)
            self._last_grant = self._clock()
