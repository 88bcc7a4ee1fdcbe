"""Repository pattern implementations for database access."""

from .base import BaseRepository
from .program import ProgramRepository
from .title import PROTECTED_TITLE_FIELDS, TitleRepository, UpsertOutcome

__all__ = [
    "PROTECTED_TITLE_FIELDS",
    "BaseRepository",
    "ProgramRepository",
    "TitleRepository",
    "UpsertOutcome",
]
