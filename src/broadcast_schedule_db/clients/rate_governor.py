"""Tiered request-rate governor.

Enforces three limits on outgoing requests to a remote service:

- a minimum spacing between consecutive requests
- a rolling one-hour request cap
- a rolling one-day request cap

Either cap may be disabled by passing ``None``. The TMDB client runs
with spacing only; the Syoboi client uses all three tiers.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from broadcast_schedule_db.config import SyoboiConfig, TmdbConfig

logger = logging.getLogger(__name__)

HOUR_SECONDS = 3600.0
DAY_SECONDS = 86400.0


@dataclass
class RateLimiterState:
    """Mutable bookkeeping for a RateGovernor.

    Instants come from the governor's clock (monotonic seconds).
    """

    last_request: float | None = None
    hourly_window: deque[float] = field(default_factory=deque)
    daily_window: deque[float] = field(default_factory=deque)

    def purge(self, now: float) -> None:
        """Drop instants that have aged out of their window."""
        while self.hourly_window and now - self.hourly_window[0] >= HOUR_SECONDS:
            self.hourly_window.popleft()
        while self.daily_window and now - self.daily_window[0] >= DAY_SECONDS:
            self.daily_window.popleft()

    def record(self, now: float) -> None:
        self.hourly_window.append(now)
        self.daily_window.append(now)
        self.last_request = now


class RateGovernor:
    """Blocks callers until one more request is permitted.

    Usage:
        governor = RateGovernor(min_interval=1.0, hourly_limit=500, daily_limit=10_000)

        # Before each request (including retries)
        await governor.acquire()

    Concurrent callers serialize on an internal lock held for the whole
    acquisition, so the recorded instants are always in order.
    """

    def __init__(
        self,
        min_interval: float,
        hourly_limit: int | None = 500,
        daily_limit: int | None = 10_000,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the governor.

        Args:
            min_interval: Minimum seconds between consecutive requests
            hourly_limit: Max requests per rolling hour (None = unlimited)
            daily_limit: Max requests per rolling day (None = unlimited)
            clock: Monotonic clock returning seconds
            sleep: Async sleep used for every wait
        """
        self.min_interval = min_interval
        self.hourly_limit = hourly_limit
        self.daily_limit = daily_limit
        self._clock = clock
        self._sleep = sleep
        self._state = RateLimiterState()
        self._lock = asyncio.Lock()

    @classmethod
    def for_syoboi(cls, config: SyoboiConfig) -> RateGovernor:
        """Build the three-tier governor used for Syoboi Calendar."""
        return cls(
            min_interval=config.min_interval_ms / 1000,
            hourly_limit=config.hourly_limit,
            daily_limit=config.daily_limit,
        )

    @classmethod
    def for_tmdb(cls, config: TmdbConfig) -> RateGovernor:
        """Build the spacing-only governor used for TMDB."""
        return cls(
            min_interval=config.min_interval_ms / 1000,
            hourly_limit=None,
            daily_limit=None,
        )

    @property
    def state(self) -> RateLimiterState:
        """Current limiter state (read-only use)."""
        return self._state

    # -------------------------------------------------------------------------
    # Acquisition
    # -------------------------------------------------------------------------
    async def acquire(self) -> None:
        """Wait until a request is permitted, then record it.

        Order: spacing, hourly cap, daily cap. Each wait samples a fresh
        "now" so the later tiers see the time already spent waiting.
        """
        async with self._lock:
            state = self._state
            state.purge(self._clock())

            if state.last_request is not None:
                elapsed = self._clock() - state.last_request
                if elapsed < self.min_interval:
                    await self._sleep(self.min_interval - elapsed)

            if self.hourly_limit is not None and len(state.hourly_window) >= self.hourly_limit:
                wait = state.hourly_window[0] + HOUR_SECONDS - self._clock()
                if wait > 0:
                    logger.warning("Hourly request cap reached, waiting %.1fs", wait)
                    await self._sleep(wait)
                state.purge(self._clock())

            if self.daily_limit is not None and len(state.daily_window) >= self.daily_limit:
                wait = state.daily_window[0] + DAY_SECONDS - self._clock()
                if wait > 0:
                    logger.warning("Daily request cap reached, waiting %.1fs", wait)
                    await self._sleep(wait)
                state.purge(self._clock())

            state.record(self._clock())
