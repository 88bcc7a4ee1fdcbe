"""Unit tests for RateGovernor.

These tests drive the governor with a fake monotonic clock whose sleep
advances time instantly, so every wait can be asserted exactly.
"""

import asyncio
from collections import deque

import pytest

from broadcast_schedule_db.clients.rate_governor import (
    DAY_SECONDS,
    HOUR_SECONDS,
    RateGovernor,
    RateLimiterState,
)
from broadcast_schedule_db.config import SyoboiConfig, TmdbConfig


def make_governor(clock, min_interval=1.0, hourly_limit=None, daily_limit=None) -> RateGovernor:
    """Helper to build a governor on the fake clock."""
    return RateGovernor(
        min_interval,
        hourly_limit,
        daily_limit,
        clock=clock,
        sleep=clock.sleep,
    )


class TestRateLimiterState:
    """Tests for window bookkeeping."""

    def test_record_appends_to_both_windows(self) -> None:
        """record() stores the instant in both windows and as last request."""
        state = RateLimiterState()
        state.record(10.0)

        assert state.last_request == 10.0
        assert state.hourly_window == deque([10.0])
        assert state.daily_window == deque([10.0])

    def test_purge_drops_entry_exactly_one_hour_old(self) -> None:
        """An instant exactly one hour old leaves the hourly window only."""
        state = RateLimiterState()
        state.record(0.0)

        state.purge(HOUR_SECONDS)

        assert len(state.hourly_window) == 0
        assert len(state.daily_window) == 1

    def test_purge_keeps_recent_entries(self) -> None:
        """Instants younger than the window survive a purge."""
        state = RateLimiterState()
        state.record(0.0)
        state.record(100.0)

        state.purge(HOUR_SECONDS + 50.0)

        assert state.hourly_window == deque([100.0])

    def test_purge_daily_window(self) -> None:
        """The daily window ages out after 24 hours."""
        state = RateLimiterState()
        state.record(0.0)

        state.purge(DAY_SECONDS)

        assert len(state.daily_window) == 0


class TestRateGovernorFactories:
    """Tests for service-specific constructors."""

    def test_for_syoboi_uses_three_tiers(self) -> None:
        """Syoboi governor enforces spacing, hourly and daily caps."""
        governor = RateGovernor.for_syoboi(SyoboiConfig())

        assert governor.min_interval == 1.0
        assert governor.hourly_limit == 500
        assert governor.daily_limit == 10_000

    def test_for_tmdb_is_spacing_only(self) -> None:
        """TMDB governor has no hourly or daily cap."""
        governor = RateGovernor.for_tmdb(TmdbConfig())

        assert governor.min_interval == pytest.approx(0.025)
        assert governor.hourly_limit is None
        assert governor.daily_limit is None


class TestSpacing:
    """Tests for minimum spacing between requests."""

    async def test_first_request_does_not_wait(self, fake_clock) -> None:
        """The very first acquisition is immediate."""
        governor = make_governor(fake_clock)

        await governor.acquire()

        assert fake_clock.sleeps == []
        assert governor.state.last_request == 1_000.0

    async def test_back_to_back_requests_are_spaced(self, fake_clock) -> None:
        """A second request right away waits the full interval."""
        governor = make_governor(fake_clock)

        await governor.acquire()
        await governor.acquire()

        assert fake_clock.sleeps == [1.0]
        assert governor.state.last_request == 1_001.0

    async def test_partial_elapsed_time_is_credited(self, fake_clock) -> None:
        """Only the remainder of the interval is waited."""
        governor = make_governor(fake_clock)

        await governor.acquire()
        fake_clock.advance(0.4)
        await governor.acquire()

        assert fake_clock.sleeps == pytest.approx([0.6])

    async def test_no_wait_after_interval_elapsed(self, fake_clock) -> None:
        """A request after the interval has passed is immediate."""
        governor = make_governor(fake_clock)

        await governor.acquire()
        fake_clock.advance(5.0)
        await governor.acquire()

        assert fake_clock.sleeps == []

    async def test_concurrent_callers_are_serialized(self, fake_clock) -> None:
        """Concurrent acquisitions are recorded in order, one interval apart."""
        governor = make_governor(fake_clock)

        await asyncio.gather(governor.acquire(), governor.acquire(), governor.acquire())

        assert fake_clock.sleeps == [1.0, 1.0]
        assert list(governor.state.hourly_window) == [1_000.0, 1_001.0, 1_002.0]


class TestHourlyCap:
    """Tests for the rolling one-hour cap."""

    async def test_waits_for_oldest_entry_to_age_out(self, fake_clock) -> None:
        """Once the cap is reached the next request waits until the oldest is an hour old."""
        governor = make_governor(fake_clock, min_interval=0.0, hourly_limit=3)

        await governor.acquire()
        fake_clock.advance(600)
        await governor.acquire()
        fake_clock.advance(600)
        await governor.acquire()
        await governor.acquire()

        assert fake_clock.sleeps == [2400.0]
        assert fake_clock.now == 1_000.0 + HOUR_SECONDS
        # Oldest purged, the others still inside the window
        assert list(governor.state.hourly_window) == [1_600.0, 2_200.0, 4_600.0]

    async def test_under_cap_does_not_wait(self, fake_clock) -> None:
        """Requests below the cap only observe spacing."""
        governor = make_governor(fake_clock, min_interval=0.0, hourly_limit=3)

        for _ in range(3):
            await governor.acquire()

        assert fake_clock.sleeps == []

    async def test_expired_entries_free_capacity(self, fake_clock) -> None:
        """Entries older than an hour no longer count toward the cap."""
        governor = make_governor(fake_clock, min_interval=0.0, hourly_limit=2)

        await governor.acquire()
        await governor.acquire()
        fake_clock.advance(HOUR_SECONDS)
        await governor.acquire()

        assert fake_clock.sleeps == []
        assert len(governor.state.hourly_window) == 1


class TestDailyCap:
    """Tests for the rolling one-day cap."""

    async def test_waits_for_daily_window(self, fake_clock) -> None:
        """The daily cap blocks until the oldest request is a day old."""
        governor = make_governor(fake_clock, min_interval=0.0, daily_limit=2)

        await governor.acquire()
        await governor.acquire()
        await governor.acquire()

        assert fake_clock.sleeps == [DAY_SECONDS]

    async def test_daily_wait_accounts_for_hourly_wait(self, fake_clock) -> None:
        """The daily tier sees the time already spent on the hourly wait."""
        governor = make_governor(fake_clock, min_interval=0.0, hourly_limit=2, daily_limit=3)

        await governor.acquire()
        await governor.acquire()
        await governor.acquire()  # hourly wait
        await governor.acquire()  # daily wait

        assert fake_clock.sleeps == [HOUR_SECONDS, DAY_SECONDS - HOUR_SECONDS]
        assert fake_clock.now == 1_000.0 + DAY_SECONDS
