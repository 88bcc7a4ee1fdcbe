"""Async TMDB API client.

Used by operators to look up the series/season a cached title maps to.
Requests are spaced by a spacing-only RateGovernor and retried on 429
with a linear backoff (1s, 2s, 3s). Other error statuses are terminal
and carry TMDB's ``status_message``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
from pydantic import BaseModel

from broadcast_schedule_db.config import TmdbConfig, get_settings
from broadcast_schedule_db.schemas.tmdb import (
    TmdbSearchMovieResponse,
    TmdbSearchTvResponse,
    TmdbTvDetails,
    TmdbTvSeason,
    decode_json,
    error_message,
)

from .exceptions import ApiClientError
from .executor import RequestExecutor, RetryPolicy
from .rate_governor import RateGovernor

ModelT = TypeVar("ModelT", bound=BaseModel)


class TmdbClient:
    """Async client for the TMDB v3 API.

    Usage:
        async with TmdbClient() as client:
            hits = await client.search_tv("SPY×FAMILY")
            details = await client.tv_details(hits.results[0].id)
    """

    def __init__(
        self,
        token: str | None = None,
        config: TmdbConfig | None = None,
        *,
        governor: RateGovernor | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the TMDB client.

        Args:
            token: TMDB read access token. If not provided, uses
                   TMDB_API_TOKEN from settings.
            config: Client configuration. If not provided, uses settings.
            governor: Rate governor; spacing-only by default
            transport: Optional httpx transport (tests use MockTransport)
            sleep: Async sleep used between retries

        Raises:
            ApiClientError: If no token is available.
        """
        settings = get_settings()
        self._token = token or settings.tmdb_api_token
        if not self._token:
            raise ApiClientError("TMDB token required. Set TMDB_API_TOKEN environment variable.")
        self._config = config or settings.tmdb
        self._governor = governor or RateGovernor.for_tmdb(self._config)
        self._http = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers={
                "Authorization": f"Bearer {self._token}",
                "User-Agent": self._config.user_agent,
                "Accept": "application/json",
            },
            timeout=self._config.timeout_seconds,
            transport=transport,
        )
        self._executor = RequestExecutor(
            "tmdb",
            self._http,
            self._governor,
            RetryPolicy(
                max_retries=self._config.max_retries,
                base_delay=self._config.retry_backoff_seconds,
                linear=True,
            ),
            error_message=error_message,
            sleep=sleep,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def __aenter__(self) -> TmdbClient:
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

    async def _get(
        self,
        path: str,
        params: dict[str, str | int],
        model: type[ModelT],
    ) -> ModelT:
        return await self._executor.execute(
            lambda: self._http.build_request("GET", path, params=params),
            lambda body: decode_json(model, body, path),
        )

    # -------------------------------------------------------------------------
    # TV
    # -------------------------------------------------------------------------
    async def search_tv(
        self,
        query: str,
        *,
        page: int = 1,
        first_air_date_year: int | None = None,
        year: int | None = None,
        include_adult: bool = False,
        language: str | None = None,
    ) -> TmdbSearchTvResponse:
        """Search TV series by name.

        Args:
            query: Search text
            page: Result page (1-500)
            first_air_date_year: Filter by first air date year
            year: Filter by any air date year
            include_adult: Include adult titles
            language: Response language (default from config)

        Returns:
            One page of search results
        """
        params: dict[str, str | int] = {
            "query": query,
            "language": language or self._config.language,
            "page": page,
            "include_adult": "true" if include_adult else "false",
        }
        if first_air_date_year is not None:
            params["first_air_date_year"] = first_air_date_year
        if year is not None:
            params["year"] = year
        return await self._get("search/tv", params, TmdbSearchTvResponse)

    async def tv_details(self, series_id: int, language: str | None = None) -> TmdbTvDetails:
        """Fetch series details, including the season list."""
        params: dict[str, str | int] = {"language": language or self._config.language}
        return await self._get(f"tv/{series_id}", params, TmdbTvDetails)

    async def tv_season(
        self,
        series_id: int,
        season_number: int,
        language: str | None = None,
    ) -> TmdbTvSeason:
        """Fetch one season with its episodes."""
        params: dict[str, str | int] = {"language": language or self._config.language}
        return await self._get(f"tv/{series_id}/season/{season_number}", params, TmdbTvSeason)

    # -------------------------------------------------------------------------
    # Movies
    # -------------------------------------------------------------------------
    async def search_movie(
        self,
        query: str,
        *,
        page: int = 1,
        primary_release_year: int | None = None,
        year: int | None = None,
        region: str | None = None,
        include_adult: bool = False,
        language: str | None = None,
    ) -> TmdbSearchMovieResponse:
        """Search movies by title.

        Args:
            query: Search text
            page: Result page (1-500)
            primary_release_year: Filter by primary release year
            year: Filter by any release year
            region: ISO 3166-1 region for release dates
            include_adult: Include adult titles
            language: Response language (default from config)

        Returns:
            One page of search results
        """
        params: dict[str, str | int] = {
            "query": query,
            "language": language or self._config.language,
            "page": page,
            "include_adult": "true" if include_adult else "false",
        }
        if primary_release_year is not None:
            params["primary_release_year"] = primary_release_year
        if year is not None:
            params["year"] = year
        if region is not None:
            params["region"] = region
        return await self._get("search/movie", params, TmdbSearchMovieResponse)
