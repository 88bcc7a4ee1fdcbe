"""Repository for Title model operations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from broadcast_schedule_db.db.models import Title
from broadcast_schedule_db.schemas.cache import CachedTitle

from .base import BaseRepository

# Operator-curated columns; an upsert fills them only while still empty
PROTECTED_TITLE_FIELDS = ("tmdb_series_id", "tmdb_season_number")


@dataclass
class UpsertOutcome:
    """Row counts for one upsert batch."""

    inserted: int = 0
    updated: int = 0
    unchanged: int = 0

    @property
    def written(self) -> int:
        return self.inserted + self.updated


class TitleRepository(BaseRepository[Title]):
    """Repository for Title entities.

    Upsert Rules:
        - New TID: insert every column
        - Known TID, same last_update: no-op
        - Known TID, different last_update: overwrite synced columns;
          the TMDB mapping is only filled where the stored value is None
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Title, Title.tid)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_tids(self, tids: Iterable[int]) -> list[Title]:
        """Get titles by TID, ordered by TID.

        Args:
            tids: Title IDs (an empty input returns an empty list)

        Returns:
            Titles that exist in the cache
        """
        found = await self.get_many(tids)
        return [found[tid] for tid in sorted(found)]

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def upsert_many(self, records: Sequence[CachedTitle]) -> UpsertOutcome:
        """Insert new titles and update changed ones.

        Reads the existing rows first, then decides per record. Does not
        commit; the caller's transaction makes the batch all-or-nothing.

        Args:
            records: Titles to write

        Returns:
            Counts of inserted, updated and unchanged rows
        """
        outcome = UpsertOutcome()
        existing = await self.get_many(r.tid for r in records)

        for record in records:
            current = existing.get(record.tid)
            if current is None:
                existing[record.tid] = self.add(Title(**record.model_dump()))
                outcome.inserted += 1
            elif current.last_update == record.last_update:
                outcome.unchanged += 1
            else:
                self._apply(current, record)
                outcome.updated += 1

        await self.flush()
        return outcome

    async def update_tmdb_mapping(
        self,
        tid: int,
        series_id: int | None,
        season_number: int | None,
    ) -> Title | None:
        """Set (or clear) the TMDB mapping of a title.

        This is the only write path that may change a mapping once set.

        Args:
            tid: Title ID
            series_id: TMDB series ID, or None to clear
            season_number: TMDB season number, or None to clear

        Returns:
            Updated title or None if the TID is not cached
        """
        title = await self.get(tid)
        if title is None:
            return None

        title.tmdb_series_id = series_id
        title.tmdb_season_number = season_number
        await self.flush()
        return title

    @staticmethod
    def _apply(title: Title, record: CachedTitle) -> None:
        for key, value in record.model_dump().items():
            if key in PROTECTED_TITLE_FIELDS:
                if getattr(title, key) is None and value is not None:
                    setattr(title, key, value)
                continue
            setattr(title, key, value)
