"""Pytest configuration and shared fixtures.

Usage Guide:
- For cache tests: use the `store` fixture (in-memory SQLite, tables created)
- For wire records and cache rows: import factories from tests.factories
- For HTTP tests: build clients with an httpx.MockTransport
- For time-dependent tests: use `fake_clock` and its `sleep`
"""

from datetime import datetime

import pytest

from broadcast_schedule_db.db.cache_store import CacheStore
from broadcast_schedule_db.db.engine import (
    create_engine_for_url,
    create_session_factory,
    create_tables,
)

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# A consistent "test epoch" for deterministic windows and broadcast slots.
# Syoboi times are local wall-clock values without a timezone.
# -----------------------------------------------------------------------------

APR_01 = datetime(2024, 4, 1, 0, 0, 0)
APR_02 = datetime(2024, 4, 2, 0, 0, 0)
APR_07 = datetime(2024, 4, 7, 23, 59, 59)

# Wire strings (for Syoboi XML bodies)
APR_01_2300 = "2024-04-01 23:00:00"
APR_01_2330 = "2024-04-01 23:30:00"
APR_02_0100 = "2024-04-02 01:00:00"

LAST_UPDATE_V1 = "2024-03-20 12:00:00"
LAST_UPDATE_V2 = "2024-03-27 12:00:00"


# -----------------------------------------------------------------------------
# Database Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
async def test_engine():
    """Create an in-memory SQLite engine for tests.

    Each test gets a fresh database with all tables created.
    """
    engine = create_engine_for_url("sqlite+aiosqlite:///:memory:")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    """Session factory bound to the test engine."""
    return create_session_factory(test_engine)


@pytest.fixture
def store(session_factory) -> CacheStore:
    """CacheStore over a fresh in-memory database."""
    return CacheStore(session_factory)


# -----------------------------------------------------------------------------
# Time Fixtures
# -----------------------------------------------------------------------------
class FakeClock:
    """Monotonic clock whose sleep advances time instantly.

    Records every requested sleep so tests can assert on the schedule.
    """

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """Fresh fake clock starting at t=1000s."""
    return FakeClock()


class RecordingSleep:
    """Async sleep stand-in that only records the requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    """Sleep that returns immediately and records delays."""
    return RecordingSleep()
