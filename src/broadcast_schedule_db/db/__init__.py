"""Database module for Broadcast Schedule DB."""

from broadcast_schedule_db.db.cache_store import CacheStore
from broadcast_schedule_db.db.engine import (
    create_engine_for_url,
    create_session_factory,
    create_tables,
    dispose_engine,
    get_engine,
    get_session_factory,
)
from broadcast_schedule_db.db.models import Base, Program, Title
from broadcast_schedule_db.db.repositories import (
    BaseRepository,
    ProgramRepository,
    TitleRepository,
)

__all__ = [
    # Models
    "Base",
    "Program",
    "Title",
    # Engine
    "create_engine_for_url",
    "create_session_factory",
    "create_tables",
    "dispose_engine",
    "get_engine",
    "get_session_factory",
    # Repositories
    "BaseRepository",
    "ProgramRepository",
    "TitleRepository",
    # Cache
    "CacheStore",
]
