"""Cursor-driven pagination over a ProgLookup time window.

ProgLookup silently truncates every response at the page limit (5000).
To fetch a whole window the paginator re-requests ``[cursor, end]``,
moving the cursor to the latest start time seen on each full page, until
a page comes back short.

Slots starting exactly at the cursor are returned again by the next
page, so results are deduplicated by PID (first occurrence wins).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from broadcast_schedule_db.logging import get_logger
from broadcast_schedule_db.schemas.params import ProgLookupParams
from broadcast_schedule_db.schemas.syoboi import SYOBOI_DATETIME_FORMAT, SyoboiProgram

logger = get_logger(__name__)

PROG_LOOKUP_LIMIT = 5000

FetchPage = Callable[[ProgLookupParams], Awaitable[list[SyoboiProgram]]]


class PaginationError(ValueError):
    """Raised for structural pagination failures (not retried)."""

    pass


@dataclass
class PaginationStats:
    """Counters for one fetch_all call."""

    pages: int = 0
    """Pages requested"""

    total_fetched: int = 0
    """Records received across all pages, duplicates included"""

    duplicates: int = 0
    """Records dropped because their PID was already seen"""

    def to_dict(self) -> dict[str, Any]:
        return {
            "pages": self.pages,
            "total_fetched": self.total_fetched,
            "duplicates": self.duplicates,
        }


class RangePaginator:
    """Fetches every program in a time window.

    Usage:
        paginator = RangePaginator(client.lookup_programs)
        programs = await paginator.fetch_all(
            ProgLookupParams(range=TimeRange(start=start, end=end), ch_ids=[1, 2])
        )
        print(paginator.stats.pages)
    """

    def __init__(self, fetch_page: FetchPage, page_limit: int = PROG_LOOKUP_LIMIT) -> None:
        self._fetch_page = fetch_page
        self.page_limit = page_limit
        self.stats = PaginationStats()

    async def fetch_all(self, params: ProgLookupParams) -> list[SyoboiProgram]:
        """Fetch all pages of a windowed ProgLookup.

        Args:
            params: Lookup filters; ``range`` is required

        Returns:
            Unique programs in the order first received

        Raises:
            PaginationError: Missing range, or an unparseable StTime on a full page
        """
        if params.range is None:
            raise PaginationError("range is required for paginated ProgLookup")

        self.stats = PaginationStats()
        end = params.range.end
        cursor = params.range.start
        seen: set[int] = set()
        programs: list[SyoboiProgram] = []

        while True:
            page = await self._fetch_page(params.with_range(cursor, end))
            self.stats.pages += 1
            self.stats.total_fetched += len(page)

            for program in page:
                if program.pid in seen:
                    self.stats.duplicates += 1
                    continue
                seen.add(program.pid)
                programs.append(program)

            logger.debug(
                "ProgLookup page {} from {}: {} records",
                self.stats.pages,
                cursor,
                len(page),
            )

            if len(page) < self.page_limit:
                break

            next_cursor = self._next_cursor(page)
            if next_cursor <= cursor:
                logger.warning(
                    "Pagination cursor did not advance past {}; stopping with {} programs",
                    cursor,
                    len(programs),
                )
                break
            if next_cursor > end:
                break
            cursor = next_cursor

        if self.stats.duplicates:
            logger.info("Skipped {} duplicate programs across pages", self.stats.duplicates)
        return programs

    @staticmethod
    def _next_cursor(page: list[SyoboiProgram]) -> datetime:
        # Wire timestamps are fixed-width, so string order is time order
        latest = max(program.st_time for program in page)
        try:
            return datetime.strptime(latest, SYOBOI_DATETIME_FORMAT)
        except ValueError as e:
            raise PaginationError(f"invalid StTime for cursor: {latest!r}") from e
