"""Chunked key lookup with an empty-chunk retry heuristic.

TitleLookup accepts a comma-joined TID list, so titles are fetched in
fixed-size chunks. Under load Syoboi sometimes answers a valid chunk
with an empty item list instead of a throttle status. A non-empty chunk
that yields zero records is therefore retried with exponential backoff.

The heuristic cannot tell a silent throttle from a chunk whose keys
genuinely match nothing; after the last retry the chunk is skipped with
a warning.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Generic, TypeVar

from broadcast_schedule_db.logging import get_logger

logger = get_logger(__name__)

K = TypeVar("K")
T = TypeVar("T")

DEFAULT_CHUNK_SIZE = 50
DEFAULT_EMPTY_RETRIES = 5
DEFAULT_BASE_BACKOFF = 10.0


def empty_chunk_backoff(attempt: int, base: float = DEFAULT_BASE_BACKOFF) -> float:
    """Backoff before empty-chunk retry ``attempt`` (1-based): base * 2^(attempt-1)."""
    return base * 2 ** (attempt - 1)


def chunked(keys: Sequence[K], size: int) -> list[Sequence[K]]:
    return [keys[i : i + size] for i in range(0, len(keys), size)]


class ChunkedLookup(Generic[K, T]):
    """Fetches records for a key list in sequential chunks.

    Usage:
        lookup = ChunkedLookup(client.lookup_titles, chunk_size=50)
        titles = await lookup.fetch_by_keys(sorted(tids))
    """

    def __init__(
        self,
        fetch: Callable[[Sequence[K]], Awaitable[list[T]]],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        empty_retries: int = DEFAULT_EMPTY_RETRIES,
        base_backoff: float = DEFAULT_BASE_BACKOFF,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the lookup.

        Args:
            fetch: Fetches the records for one chunk of keys
            chunk_size: Keys per request
            empty_retries: Retries for a chunk that returned nothing
            base_backoff: First empty-chunk backoff in seconds (doubles per retry)
            sleep: Async sleep used for backoff
        """
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self._fetch = fetch
        self.chunk_size = chunk_size
        self.empty_retries = empty_retries
        self.base_backoff = base_backoff
        self._sleep = sleep
        self.empty_chunks = 0

    async def fetch_by_keys(self, keys: Sequence[K]) -> list[T]:
        """Fetch all records for the given keys.

        Returns:
            Records concatenated in chunk order (no deduplication)
        """
        self.empty_chunks = 0
        chunks = chunked(keys, self.chunk_size)
        results: list[T] = []

        for index, chunk in enumerate(chunks, start=1):
            records = await self._fetch_chunk(chunk, index, len(chunks))
            results.extend(records)

        return results

    async def _fetch_chunk(self, chunk: Sequence[K], index: int, total: int) -> list[T]:
        records = await self._fetch(chunk)
        attempt = 0
        while not records and attempt < self.empty_retries:
            attempt += 1
            delay = empty_chunk_backoff(attempt, self.base_backoff)
            logger.warning(
                "Chunk {}/{} ({} keys) returned no records, retry {}/{} in {:.0f}s",
                index,
                total,
                len(chunk),
                attempt,
                self.empty_retries,
                delay,
            )
            await self._sleep(delay)
            records = await self._fetch(chunk)

        if not records:
            self.empty_chunks += 1
            logger.warning(
                "Chunk {}/{} still empty after {} retries, skipping keys {}..{}",
                index,
                total,
                self.empty_retries,
                chunk[0],
                chunk[-1],
            )
        return records
