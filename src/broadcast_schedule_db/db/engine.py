"""Async SQLAlchemy engine and session management."""

from typing import Any

from sqlalchemy import event, pool
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from broadcast_schedule_db.config import get_settings
from broadcast_schedule_db.db.models import Base

# Module-level engine instance (initialized lazily)
_engine: AsyncEngine | None = None
_async_session_factory: async_sessionmaker[AsyncSession] | None = None


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    """Enforce programs.tid -> titles.tid on every new SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine_for_url(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """Create an async engine, enabling foreign keys for SQLite.

    Args:
        database_url: Async SQLAlchemy URL (e.g. sqlite+aiosqlite:///./cache.db)
        echo: Log every SQL statement

    Returns:
        A new AsyncEngine (caller owns disposal)
    """
    # In-memory SQLite must keep a single connection or every session sees an empty database
    in_memory = ":memory:" in database_url
    engine = create_async_engine(
        database_url,
        echo=echo,
        poolclass=pool.StaticPool if in_memory else pool.NullPool,
    )
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to the given engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def get_engine() -> AsyncEngine:
    """Get or create the application's async engine from settings."""
    global _engine
    if _engine is None:
        settings = get_settings()
        _engine = create_engine_for_url(
            settings.database_url,
            echo=settings.environment == "development" and settings.log_level == "DEBUG",
        )
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the application's session factory."""
    global _async_session_factory
    if _async_session_factory is None:
        _async_session_factory = create_session_factory(get_engine())
    return _async_session_factory


async def create_tables(engine: AsyncEngine | None = None) -> None:
    """Create the cache tables.

    Use this for testing or quick local setup. Long-lived caches should be
    created and upgraded with Alembic migrations.
    """
    engine = engine or get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the engine and close all connections.

    Call this when shutting down the application.
    """
    global _engine, _async_session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _async_session_factory = None
