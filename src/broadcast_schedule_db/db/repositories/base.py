"""Base repository pattern implementation for async SQLAlchemy.

Provides common session handling and keyed reads that can be
shared across all repositories.
"""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from broadcast_schedule_db.db.models import Base

# Generic type variable for model classes
ModelT = TypeVar("ModelT", bound=Base)

# Keys per IN (...) clause; stays well under SQLite's bound-parameter limit
IN_CLAUSE_BATCH = 500


class BaseRepository(Generic[ModelT]):
    """Base repository with common async session handling.

    All repositories should inherit from this class to get
    consistent session management and common query patterns.

    Usage:
        class TitleRepository(BaseRepository[Title]):
            def __init__(self, session: AsyncSession) -> None:
                super().__init__(session, Title, Title.tid)

    Repositories never commit. The caller owns the transaction, so a
    batch of writes across repositories is all-or-nothing.
    """

    def __init__(
        self,
        session: AsyncSession,
        model_class: type[ModelT],
        key_column: Any,
    ) -> None:
        """Initialize the repository with a session.

        Args:
            session: Async SQLAlchemy session (caller manages lifecycle)
            model_class: The SQLAlchemy model class this repository manages
            key_column: Primary key column used for keyed reads
        """
        self._session = session
        self._model_class = model_class
        self._key_column = key_column

    # -------------------------------------------------------------------------
    # Common Read Operations
    # -------------------------------------------------------------------------

    async def get(self, key: int) -> ModelT | None:
        """Get an entity by its primary key.

        Args:
            key: Primary key value

        Returns:
            Entity or None if not found
        """
        return await self._session.get(self._model_class, key)

    async def get_many(self, keys: Iterable[int]) -> dict[int, ModelT]:
        """Get entities by primary key.

        Args:
            keys: Primary key values (duplicates are ignored)

        Returns:
            Mapping of key to entity for the keys that exist
        """
        unique = sorted(set(keys))
        found: dict[int, ModelT] = {}
        for start in range(0, len(unique), IN_CLAUSE_BATCH):
            batch = unique[start : start + IN_CLAUSE_BATCH]
            stmt = select(self._model_class).where(self._key_column.in_(batch))
            result = await self._session.execute(stmt)
            for entity in result.scalars():
                found[self._key_of(entity)] = entity
        return found

    async def get_all(self, order_by: Any = None) -> list[ModelT]:
        """Get all entities, optionally ordered.

        Args:
            order_by: Column to order by (default: primary key)

        Returns:
            List of entities
        """
        stmt = select(self._model_class).order_by(
            order_by if order_by is not None else self._key_column
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    # -------------------------------------------------------------------------
    # Common Write Operations
    # -------------------------------------------------------------------------

    def add(self, entity: ModelT) -> ModelT:
        """Add an entity to the session (does not flush).

        The entity will be persisted when the session commits or flushes.

        Args:
            entity: Entity to add

        Returns:
            The same entity (for chaining)
        """
        self._session.add(entity)
        return entity

    async def flush(self) -> None:
        """Flush pending changes to the database.

        This executes SQL but does not commit the transaction, so
        constraint violations surface here, inside the caller's transaction.
        """
        await self._session.flush()

    def _key_of(self, entity: ModelT) -> int:
        return int(getattr(entity, self._key_column.key))
