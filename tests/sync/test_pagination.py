"""Tests for RangePaginator.

Tests cover:
- Single short page
- Cursor advance on a full page, with overlap deduplication
- Stop conditions (short page, stalled cursor, cursor past range end)
- Structural errors (missing range, unparseable StTime)
"""

from datetime import datetime

import pytest

from broadcast_schedule_db.schemas.params import ProgLookupParams, TimeRange
from broadcast_schedule_db.sync.pagination import (
    PROG_LOOKUP_LIMIT,
    PaginationError,
    RangePaginator,
)
from tests.conftest import APR_01, APR_07
from tests.factories import make_program_page, make_syoboi_program


class ScriptedPages:
    """Fake ProgLookup returning one scripted page per call."""

    def __init__(self, *pages) -> None:
        self._pages = list(pages)
        self.calls: list[ProgLookupParams] = []

    async def __call__(self, params: ProgLookupParams):
        self.calls.append(params)
        if len(self._pages) > 1:
            return self._pages.pop(0)
        return self._pages[0]


def window(start: datetime = APR_01, end: datetime = APR_07) -> ProgLookupParams:
    return ProgLookupParams(range=TimeRange(start=start, end=end))


class TestSinglePage:
    """Tests for windows that fit in one page."""

    async def test_short_page_stops(self) -> None:
        """A page below the limit is the last page."""
        fetch = ScriptedPages(make_program_page(3))
        paginator = RangePaginator(fetch)

        programs = await paginator.fetch_all(window())

        assert [p.pid for p in programs] == [1, 2, 3]
        assert len(fetch.calls) == 1
        assert paginator.stats.to_dict() == {"pages": 1, "total_fetched": 3, "duplicates": 0}

    async def test_empty_window(self) -> None:
        """An empty first page returns nothing."""
        fetch = ScriptedPages([])
        paginator = RangePaginator(fetch)

        assert await paginator.fetch_all(window()) == []
        assert paginator.stats.pages == 1

    async def test_missing_range_raises(self) -> None:
        """Pagination needs a window to move through."""
        paginator = RangePaginator(ScriptedPages([]))

        with pytest.raises(PaginationError, match="range is required"):
            await paginator.fetch_all(ProgLookupParams(tids=[6309]))


class TestCursorAdvance:
    """Tests for multi-page windows."""

    async def test_two_pages(self) -> None:
        """A full page of 5000 followed by 2 more yields 5002 programs."""
        first = make_program_page(PROG_LOOKUP_LIMIT)
        second = make_program_page(2, first_pid=PROG_LOOKUP_LIMIT + 1, start=first[-1].start_at)
        fetch = ScriptedPages(first, second)
        paginator = RangePaginator(fetch)

        programs = await paginator.fetch_all(window())

        assert len(programs) == PROG_LOOKUP_LIMIT + 2
        assert fetch.calls[1].range.start == first[-1].start_at
        assert paginator.stats.duplicates == 0

    async def test_full_page_advances_cursor_and_dedups(self) -> None:
        """A full page moves the cursor to its latest start; the overlap is dropped."""
        first = make_program_page(PROG_LOOKUP_LIMIT)
        last = first[-1]
        second = [last, *make_program_page(2, first_pid=PROG_LOOKUP_LIMIT + 1, start=last.start_at)]
        fetch = ScriptedPages(first, second)
        paginator = RangePaginator(fetch)

        programs = await paginator.fetch_all(window())

        assert len(programs) == PROG_LOOKUP_LIMIT + 2
        assert len({p.pid for p in programs}) == PROG_LOOKUP_LIMIT + 2
        assert paginator.stats.pages == 2
        assert paginator.stats.total_fetched == PROG_LOOKUP_LIMIT + 3
        assert paginator.stats.duplicates == 1

        second_range = fetch.calls[1].range
        assert second_range.start == datetime(2024, 4, 4, 11, 19, 0)
        assert second_range.end == APR_07

    async def test_first_occurrence_wins(self) -> None:
        """A duplicate PID keeps the record from the earlier page."""
        first = [
            make_syoboi_program(1, st_time="2024-04-01 10:00:00", sub_title="first"),
            make_syoboi_program(2, st_time="2024-04-01 11:00:00"),
        ]
        second = [make_syoboi_program(2, st_time="2024-04-01 11:00:00", sub_title="second")]
        paginator = RangePaginator(ScriptedPages(first, second), page_limit=2)

        programs = await paginator.fetch_all(window())

        assert [p.pid for p in programs] == [1, 2]
        assert programs[1].sub_title is None

    async def test_filters_preserved_across_pages(self) -> None:
        """Every page request keeps the channel and title filters."""
        first = make_program_page(2, step_minutes=60)
        fetch = ScriptedPages(first, [])
        paginator = RangePaginator(fetch, page_limit=2)
        params = window().model_copy(update={"ch_ids": [1, 3], "tids": [6309]})

        await paginator.fetch_all(params)

        assert len(fetch.calls) == 2
        assert all(call.ch_ids == [1, 3] for call in fetch.calls)
        assert all(call.tids == [6309] for call in fetch.calls)

    async def test_stats_reset_per_call(self) -> None:
        """Each fetch_all starts with fresh counters."""
        paginator = RangePaginator(ScriptedPages(make_program_page(3)))

        await paginator.fetch_all(window())
        await paginator.fetch_all(window())

        assert paginator.stats.pages == 1


class TestStopConditions:
    """Tests for loop termination on degenerate pages."""

    async def test_stalled_cursor_stops(self) -> None:
        """A full page whose latest start equals the cursor stops the loop."""
        page = [
            make_syoboi_program(1, st_time="2024-04-01 00:00:00"),
            make_syoboi_program(2, st_time="2024-04-01 00:00:00"),
        ]
        fetch = ScriptedPages(page)
        paginator = RangePaginator(fetch, page_limit=2)

        programs = await paginator.fetch_all(window())

        assert [p.pid for p in programs] == [1, 2]
        assert len(fetch.calls) == 1

    async def test_cursor_past_end_stops(self) -> None:
        """A cursor beyond the window end does not trigger another request."""
        page = [
            make_syoboi_program(1, st_time="2024-04-01 00:00:00"),
            make_syoboi_program(2, st_time="2024-04-01 01:00:00"),
        ]
        fetch = ScriptedPages(page)
        paginator = RangePaginator(fetch, page_limit=2)

        await paginator.fetch_all(window(end=datetime(2024, 4, 1, 0, 30, 0)))

        assert len(fetch.calls) == 1

    async def test_invalid_st_time_raises(self) -> None:
        """An unparseable StTime on a full page cannot produce a cursor."""
        page = [make_syoboi_program(1, st_time="not a time")]
        paginator = RangePaginator(ScriptedPages(page), page_limit=1)

        with pytest.raises(PaginationError, match="invalid StTime"):
            await paginator.fetch_all(window())
