"""Async Syoboi Calendar client.

All lookups go through ``db.php`` with a ``Command`` query parameter and
answer with an XML envelope. Requests share one three-tier RateGovernor
and are retried by the RequestExecutor on transport failures, throttle
statuses (429/503), and undecodable bodies.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import httpx

from broadcast_schedule_db.config import SyoboiConfig, get_settings
from broadcast_schedule_db.logging import get_logger
from broadcast_schedule_db.schemas.params import ProgLookupParams
from broadcast_schedule_db.schemas.syoboi import (
    SyoboiChannel,
    SyoboiChannelGroup,
    SyoboiProgram,
    SyoboiTitle,
    decode_ch_group_lookup,
    decode_ch_lookup,
    decode_prog_lookup,
    decode_title_lookup,
)

from .executor import RequestExecutor, RetryPolicy
from .rate_governor import RateGovernor

logger = get_logger(__name__)

T = TypeVar("T")

SYOBOI_THROTTLE_STATUSES = frozenset({429, 503})


class SyoboiClient:
    """Async client for the Syoboi Calendar lookup API.

    Usage:
        async with SyoboiClient() as client:
            titles = await client.lookup_titles([6309])
            programs = await client.lookup_programs(
                ProgLookupParams(range=TimeRange(start=start, end=end))
            )
    """

    def __init__(
        self,
        config: SyoboiConfig | None = None,
        *,
        governor: RateGovernor | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the Syoboi client.

        Args:
            config: Client configuration. If not provided, uses settings.
            governor: Rate governor shared by every request. Built from
                      config when not provided.
            transport: Optional httpx transport (tests use MockTransport)
            sleep: Async sleep used between retries
        """
        self._config = config or get_settings().syoboi
        self._governor = governor or RateGovernor.for_syoboi(self._config)
        self._http = httpx.AsyncClient(
            headers={"User-Agent": self._config.user_agent},
            timeout=self._config.timeout_seconds,
            transport=transport,
        )
        self._executor = RequestExecutor(
            "syoboi",
            self._http,
            self._governor,
            RetryPolicy(
                max_retries=self._config.max_retries,
                base_delay=self._config.retry_delay_seconds,
            ),
            throttle_statuses=SYOBOI_THROTTLE_STATUSES,
            sleep=sleep,
        )

    @property
    def governor(self) -> RateGovernor:
        """Access the rate governor."""
        return self._governor

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> SyoboiClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    async def _lookup(
        self,
        query: list[tuple[str, str]],
        decode: Callable[[str], list[T]],
    ) -> list[T]:
        command = query[0][1]
        items = await self._executor.execute(
            lambda: self._http.build_request("GET", self._config.base_url, params=query),
            decode,
        )
        logger.debug("{} returned {} items", command, len(items))
        return items

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------
    async def lookup_titles(
        self,
        tids: Sequence[int],
        fields: Sequence[str] | None = None,
    ) -> list[SyoboiTitle]:
        """Look up title records by TID.

        Args:
            tids: Title IDs to fetch (sent comma-joined)
            fields: Optional field restriction

        Returns:
            Titles in server order. The server silently omits unknown TIDs.
        """
        if not tids:
            return []

        query = [("Command", "TitleLookup"), ("TID", ",".join(str(t) for t in tids))]
        if fields:
            query.append(("Fields", ",".join(fields)))
        return await self._lookup(query, decode_title_lookup)

    async def lookup_programs(self, params: ProgLookupParams) -> list[SyoboiProgram]:
        """Fetch one ProgLookup page.

        The server caps every response at the page limit; use
        RangePaginator to fetch a whole window.
        """
        return await self._lookup(params.to_query(), decode_prog_lookup)

    async def lookup_channels(self, ch_ids: Sequence[int] | None = None) -> list[SyoboiChannel]:
        """List channels, optionally restricted to the given IDs."""
        query = [("Command", "ChLookup")]
        if ch_ids:
            query.append(("ChID", ",".join(str(c) for c in ch_ids)))
        return await self._lookup(query, decode_ch_lookup)

    async def lookup_channel_groups(
        self,
        ch_gids: Sequence[int] | None = None,
    ) -> list[SyoboiChannelGroup]:
        """List channel groups (all groups when ch_gids is not given)."""
        ch_gid = ",".join(str(g) for g in ch_gids) if ch_gids else "*"
        query = [("Command", "ChGroupLookup"), ("ChGID", ch_gid)]
        return await self._lookup(query, decode_ch_group_lookup)
