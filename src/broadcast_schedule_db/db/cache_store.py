"""Transactional facade over the title and program repositories.

Every public method runs in its own transaction: a write batch either
commits as a whole or rolls back as a whole, and reads return detached
schema objects rather than ORM rows.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from broadcast_schedule_db.logging import get_logger
from broadcast_schedule_db.schemas.cache import CachedProgram, CachedTitle

from .repositories import ProgramRepository, TitleRepository

logger = get_logger(__name__)


class CacheStore:
    """Local cache of Syoboi titles and programs.

    Usage:
        store = CacheStore(get_session_factory())
        written = await store.upsert_titles([t.to_cached() for t in titles])
        await store.set_tmdb_mapping(6309, series_id=120089, season_number=1)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def upsert_titles(self, records: Sequence[CachedTitle]) -> int:
        """Upsert titles in one transaction.

        Returns:
            Number of rows inserted or updated
        """
        if not records:
            return 0
        async with self._session_factory.begin() as session:
            outcome = await TitleRepository(session).upsert_many(records)
        logger.info(
            "Titles: {} inserted, {} updated, {} unchanged",
            outcome.inserted,
            outcome.updated,
            outcome.unchanged,
        )
        return outcome.written

    async def upsert_programs(self, records: Sequence[CachedProgram]) -> int:
        """Upsert programs in one transaction.

        Returns:
            Number of rows inserted or updated
        """
        if not records:
            return 0
        async with self._session_factory.begin() as session:
            outcome = await ProgramRepository(session).upsert_many(records)
        logger.info(
            "Programs: {} inserted, {} updated, {} unchanged",
            outcome.inserted,
            outcome.updated,
            outcome.unchanged,
        )
        return outcome.written

    async def set_tmdb_mapping(
        self,
        tid: int,
        series_id: int | None,
        season_number: int | None,
    ) -> bool:
        """Set or clear the TMDB mapping of a cached title.

        Returns:
            True if the title exists and was updated
        """
        async with self._session_factory.begin() as session:
            title = await TitleRepository(session).update_tmdb_mapping(
                tid, series_id, season_number
            )
        if title is None:
            logger.warning("Cannot map TID {}: title is not cached", tid)
            return False
        return True

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def load_titles(self) -> list[CachedTitle]:
        """All cached titles, ordered by TID."""
        async with self._session_factory() as session:
            return CachedTitle.from_orm_list(await TitleRepository(session).get_all())

    async def load_titles_by_tids(self, tids: Iterable[int]) -> list[CachedTitle]:
        """Cached titles among the given TIDs, ordered by TID."""
        tids = list(tids)
        if not tids:
            return []
        async with self._session_factory() as session:
            return CachedTitle.from_orm_list(await TitleRepository(session).get_by_tids(tids))

    async def load_programs(self) -> list[CachedProgram]:
        """All cached programs, ordered by start time."""
        async with self._session_factory() as session:
            return CachedProgram.from_orm_list(
                await ProgramRepository(session).get_all_by_start()
            )

    async def load_programs_by_tids(self, tids: Iterable[int]) -> list[CachedProgram]:
        """Cached programs of the given titles, ordered by start time."""
        tids = list(tids)
        if not tids:
            return []
        async with self._session_factory() as session:
            return CachedProgram.from_orm_list(
                await ProgramRepository(session).get_by_tids(tids)
            )
