"""Schedule sync module.

This module provides:
- RangePaginator: fetch every program in a time window
- ChunkedLookup: fetch records for a key list in chunks
- ScheduleSyncService: one end-to-end sync run
"""

from .chunked import ChunkedLookup, chunked, empty_chunk_backoff
from .pagination import PROG_LOOKUP_LIMIT, PaginationError, PaginationStats, RangePaginator
from .results import SyncResult
from .service import ScheduleSyncService, SyncStageError

__all__ = [
    # Pagination
    "PROG_LOOKUP_LIMIT",
    "PaginationError",
    "PaginationStats",
    "RangePaginator",
    # Chunking
    "ChunkedLookup",
    "chunked",
    "empty_chunk_backoff",
    # Service
    "ScheduleSyncService",
    "SyncResult",
    "SyncStageError",
]
