"""Schedule sync service.

One run:

1. Resolve the time window (default: now +/- one day)
2. Fetch every program in the window (RangePaginator)
3. Fetch the titles those programs reference (ChunkedLookup)
4. Cache the titles, then the programs whose title was fetched
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, TypeVar

from broadcast_schedule_db.config import SyncConfig, get_settings
from broadcast_schedule_db.logging import get_logger
from broadcast_schedule_db.schemas.params import ProgLookupParams, TimeRange, resolve_time_range

from .chunked import ChunkedLookup
from .pagination import RangePaginator
from .results import SyncResult

if TYPE_CHECKING:
    from broadcast_schedule_db.clients.syoboi import SyoboiClient
    from broadcast_schedule_db.db.cache_store import CacheStore
    from broadcast_schedule_db.schemas.syoboi import SyoboiProgram, SyoboiTitle

logger = get_logger(__name__)

T = TypeVar("T")


class SyncStageError(Exception):
    """Raised when a sync run fails; names the stage and chains the cause."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"sync failed during {stage}: {cause}")
        self.stage = stage


class ScheduleSyncService:
    """Synchronizes a window of Syoboi programs and their titles into the cache.

    Usage:
        async with SyoboiClient() as client:
            service = ScheduleSyncService(client, CacheStore(get_session_factory()))
            result = await service.run(ch_ids=[1, 3])
            print(result.to_dict())
    """

    def __init__(
        self,
        client: SyoboiClient,
        store: CacheStore,
        config: SyncConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the service.

        Args:
            client: Syoboi client used for ProgLookup and TitleLookup
            store: Cache the results are written to
            config: Sync configuration (uses settings if not provided)
            sleep: Async sleep used for empty-chunk backoff
        """
        self._client = client
        self._store = store
        self._config = config or get_settings().sync
        self._sleep = sleep

    async def run(
        self,
        time_range: TimeRange | None = None,
        ch_ids: Sequence[int] | None = None,
        dry_run: bool = False,
    ) -> SyncResult:
        """Run one sync.

        Args:
            time_range: Window to sync (default: now +/- default_window_days)
            ch_ids: Optional channel filter
            dry_run: Fetch everything but write nothing

        Returns:
            SyncResult with counts for every stage

        Raises:
            SyncStageError: A stage failed; ``stage`` names it
        """
        start_time = time.monotonic()
        if time_range is None:
            time_range = resolve_time_range(
                None, None, window_days=self._config.default_window_days
            )
        result = SyncResult(
            range_start=time_range.start,
            range_end=time_range.end,
            dry_run=dry_run,
        )
        logger.info(
            "Syncing programs from {} to {}{}",
            time_range.start,
            time_range.end,
            f" on channels {list(ch_ids)}" if ch_ids else "",
        )

        # Programs
        paginator = RangePaginator(self._client.lookup_programs, self._config.page_limit)
        params = ProgLookupParams(
            range=time_range,
            ch_ids=list(ch_ids) if ch_ids else None,
        )
        programs = await self._stage("fetch_programs", paginator.fetch_all(params))
        result.programs_fetched = len(programs)
        result.pagination = paginator.stats

        # Titles
        tids = sorted({p.tid for p in programs})
        result.titles_requested = len(tids)
        lookup: ChunkedLookup[int, SyoboiTitle] = ChunkedLookup(
            self._client.lookup_titles,
            chunk_size=self._config.title_chunk_size,
            empty_retries=self._config.empty_chunk_max_retries,
            base_backoff=self._config.empty_chunk_base_backoff_seconds,
            sleep=self._sleep,
        )
        titles = await self._stage("fetch_titles", lookup.fetch_by_keys(tids))
        result.titles_fetched = len(titles)
        result.empty_chunks = lookup.empty_chunks

        # Referential guard: only programs whose title is cached in this run
        fetched_tids = {t.tid for t in titles}
        kept = [p for p in programs if p.tid in fetched_tids]
        result.programs_dropped = len(programs) - len(kept)
        if result.programs_dropped:
            logger.warning(
                "Dropping {} programs whose titles were not fetched",
                result.programs_dropped,
            )

        if dry_run:
            logger.info(
                "Dry run: would cache {} titles and {} programs",
                len(titles),
                len(kept),
            )
        else:
            result.titles_written = await self._stage(
                "cache_titles",
                self._cache_titles(titles),
            )
            result.programs_written = await self._stage(
                "cache_programs",
                self._cache_programs(kept),
            )

        result.duration_seconds = time.monotonic() - start_time
        logger.info(
            "Sync complete: {} programs, {} titles fetched; {} titles, {} programs written",
            result.programs_fetched,
            result.titles_fetched,
            result.titles_written,
            result.programs_written,
        )
        return result

    async def _cache_titles(self, titles: list[SyoboiTitle]) -> int:
        return await self._store.upsert_titles([t.to_cached() for t in titles])

    async def _cache_programs(self, programs: list[SyoboiProgram]) -> int:
        return await self._store.upsert_programs([p.to_cached() for p in programs])

    @staticmethod
    async def _stage(stage: str, work: Awaitable[T]) -> T:
        try:
            return await work
        except Exception as e:
            logger.error("Sync stage {} failed: {}", stage, e)
            raise SyncStageError(stage, e) from e
