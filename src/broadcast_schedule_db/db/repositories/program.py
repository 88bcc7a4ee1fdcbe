"""Repository for Program model operations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from broadcast_schedule_db.db.models import Program
from broadcast_schedule_db.schemas.cache import CachedProgram, duration_minutes

from .base import IN_CLAUSE_BATCH, BaseRepository
from .title import UpsertOutcome


class ProgramRepository(BaseRepository[Program]):
    """Repository for Program entities.

    Programs are written whenever their last_update differs from the
    stored one; two missing tokens count as unchanged. duration_min is
    recomputed from st_time/ed_time on every write.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Program, Program.pid)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_all_by_start(self) -> list[Program]:
        """Get every cached program ordered by start time."""
        return await self.get_all(order_by=Program.st_time)

    async def get_by_tids(self, tids: Iterable[int]) -> list[Program]:
        """Get programs of the given titles, ordered by start time.

        Args:
            tids: Title IDs (an empty input returns an empty list)

        Returns:
            Matching programs
        """
        unique = sorted(set(tids))
        programs: list[Program] = []
        for start in range(0, len(unique), IN_CLAUSE_BATCH):
            batch = unique[start : start + IN_CLAUSE_BATCH]
            stmt = select(Program).where(Program.tid.in_(batch))
            result = await self._session.execute(stmt)
            programs.extend(result.scalars())
        programs.sort(key=lambda p: (p.st_time, p.pid))
        return programs

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    async def upsert_many(self, records: Sequence[CachedProgram]) -> UpsertOutcome:
        """Insert new programs and update changed ones.

        Args:
            records: Programs to write (their titles must already be cached)

        Returns:
            Counts of inserted, updated and unchanged rows
        """
        outcome = UpsertOutcome()
        existing = await self.get_many(r.pid for r in records)

        for record in records:
            values = record.model_dump()
            values["duration_min"] = duration_minutes(record.st_time, record.ed_time)

            current = existing.get(record.pid)
            if current is None:
                existing[record.pid] = self.add(Program(**values))
                outcome.inserted += 1
            elif current.last_update == record.last_update:
                outcome.unchanged += 1
            else:
                for key, value in values.items():
                    setattr(current, key, value)
                outcome.updated += 1

        await self.flush()
        return outcome
