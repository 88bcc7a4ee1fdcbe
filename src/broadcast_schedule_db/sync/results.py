"""Result objects for sync runs.

Structured results provide consistent interfaces for monitoring,
error handling, and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .pagination import PaginationStats


@dataclass
class SyncResult:
    """Outcome of one ScheduleSyncService run."""

    range_start: datetime
    """Start of the synced window."""

    range_end: datetime
    """End of the synced window."""

    dry_run: bool = False
    """True if nothing was written to the cache."""

    programs_fetched: int = 0
    """Unique programs returned by the paginator."""

    titles_requested: int = 0
    """Distinct TIDs referenced by the fetched programs."""

    titles_fetched: int = 0
    """Title records returned by TitleLookup."""

    empty_chunks: int = 0
    """Title chunks that stayed empty after every retry."""

    programs_dropped: int = 0
    """Programs skipped because their title was not fetched."""

    titles_written: int = 0
    """Title rows inserted or updated."""

    programs_written: int = 0
    """Program rows inserted or updated."""

    pagination: PaginationStats = field(default_factory=PaginationStats)
    """Page counters from the program fetch."""

    duration_seconds: float = 0.0
    """Wall time of the run."""

    @property
    def has_warnings(self) -> bool:
        """True if the run completed but skipped data."""
        return self.programs_dropped > 0 or self.empty_chunks > 0

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Dict with all result data
        """
        return {
            "range": {
                "start": self.range_start.isoformat(),
                "end": self.range_end.isoformat(),
            },
            "dry_run": self.dry_run,
            "programs_fetched": self.programs_fetched,
            "titles_requested": self.titles_requested,
            "titles_fetched": self.titles_fetched,
            "empty_chunks": self.empty_chunks,
            "programs_dropped": self.programs_dropped,
            "titles_written": self.titles_written,
            "programs_written": self.programs_written,
            "pagination": self.pagination.to_dict(),
            "has_warnings": self.has_warnings,
            "duration_seconds": round(self.duration_seconds, 2),
        }
