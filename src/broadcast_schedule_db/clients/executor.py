"""Retrying request executor shared by the remote API clients.

One logical request is issued through a RateGovernor and retried on
transient failures:

- transport errors while sending or reading the body
- throttle statuses (429, plus 503 for Syoboi), honoring Retry-After
- bodies that fail to decode or carry an application error code

Any other non-success status is terminal and raised immediately.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

import httpx

from broadcast_schedule_db.logging import bind_service

from .exceptions import (
    ApiClientError,
    ApiRateLimitError,
    ApiRetryableError,
    ApiStatusError,
    ApiTransportError,
)

if TYPE_CHECKING:
    from .rate_governor import RateGovernor

T = TypeVar("T")

DEFAULT_THROTTLE_STATUSES = frozenset({429})


@dataclass(frozen=True)
class RetryPolicy:
    """Retry budget and backoff schedule for one service.

    Backoff is a pure function of the attempt number (1-based), so the
    schedule can be checked without running any requests.
    """

    max_retries: int = 3
    """Retries after the first attempt (total attempts = max_retries + 1)"""

    base_delay: float = 2.0
    """Fixed delay, or the per-attempt unit when linear is set"""

    linear: bool = False
    """Multiply base_delay by the attempt number"""

    retry_after_margin: float = 1.0
    """Seconds added to a server-provided Retry-After"""

    def backoff(self, attempt: int) -> float:
        if self.linear:
            return self.base_delay * attempt
        return self.base_delay

    def throttle_delay(self, attempt: int, retry_after: float | None) -> float:
        """Delay after a throttle status.

        Args:
            attempt: 1-based attempt number that was throttled
            retry_after: Parsed Retry-After seconds, if the server sent one

        Returns:
            Seconds to wait before the next attempt
        """
        if retry_after is not None:
            return retry_after + self.retry_after_margin
        return self.backoff(attempt)


def parse_retry_after(value: str | None) -> float | None:
    """Parse a Retry-After header given in seconds."""
    if value is None:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    if seconds < 0:
        return None
    return seconds


class RequestExecutor:
    """Executes requests for one service under a shared governor and policy.

    Usage:
        executor = RequestExecutor("syoboi", http, governor, RetryPolicy())
        titles = await executor.execute(
            lambda: http.build_request("GET", "", params=params),
            decode_title_lookup,
        )
    """

    def __init__(
        self,
        service: str,
        http: httpx.AsyncClient,
        governor: RateGovernor,
        policy: RetryPolicy,
        *,
        throttle_statuses: frozenset[int] = DEFAULT_THROTTLE_STATUSES,
        error_message: Callable[[str], str | None] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """Initialize the executor.

        Args:
            service: Service name used in logs and error messages
            http: HTTP client the requests are sent with
            governor: Rate governor acquired before every attempt
            policy: Retry budget and backoff schedule
            throttle_statuses: Statuses treated as server-side throttling
            error_message: Extracts a message from a terminal error body
            sleep: Async sleep used between attempts
        """
        self.service = service
        self.policy = policy
        self._http = http
        self._governor = governor
        self._throttle_statuses = throttle_statuses
        self._error_message = error_message
        self._sleep = sleep
        self._log = bind_service(service)

    async def execute(
        self,
        build_request: Callable[[], httpx.Request],
        decode: Callable[[str], T],
    ) -> T:
        """Issue one logical request, retrying transient failures.

        Args:
            build_request: Builds a fresh request for each attempt
            decode: Turns the response body into a result; raises
                ApiDecodeError or ApiResultError on bad bodies

        Returns:
            The decoded result of the first successful attempt

        Raises:
            ApiStatusError: Non-throttle, non-success status (not retried)
            ApiRetryableError: Last transient error once retries are spent
            ApiClientError: Retries spent without a recorded error
        """
        attempts = self.policy.max_retries + 1
        last_error: ApiClientError | None = None

        for attempt in range(1, attempts + 1):
            await self._governor.acquire()
            try:
                return await self._attempt(build_request(), decode)
            except ApiRetryableError as e:
                last_error = e
                self._log.warning(
                    "Request failed (attempt {}/{}): {}",
                    attempt,
                    attempts,
                    e,
                    attempt=attempt,
                    error_type=type(e).__name__,
                )
                if attempt < attempts:
                    await self._sleep(self._delay_for(e, attempt))

        if last_error is not None:
            raise last_error
        raise ApiClientError(f"{self.service} failed after retries")

    async def _attempt(
        self,
        request: httpx.Request,
        decode: Callable[[str], T],
    ) -> T:
        try:
            response = await self._http.send(request, stream=True)
        except httpx.TransportError as e:
            raise ApiTransportError(f"{self.service} request failed: {e}") from e

        try:
            if response.status_code in self._throttle_statuses:
                raise ApiRateLimitError(
                    f"{self.service} throttled with HTTP {response.status_code}",
                    status_code=response.status_code,
                    retry_after=parse_retry_after(response.headers.get("Retry-After")),
                )

            if not response.is_success:
                raise ApiStatusError(response.status_code, await self._status_message(response))

            try:
                await response.aread()
            except (httpx.TransportError, httpx.StreamError) as e:
                raise ApiTransportError(f"{self.service} body read failed: {e}") from e
        finally:
            await response.aclose()

        return decode(response.text)

    async def _status_message(self, response: httpx.Response) -> str:
        """Best-effort message for a terminal status."""
        fallback = response.reason_phrase or "request failed"
        try:
            body = (await response.aread()).decode("utf-8", errors="replace")
        except (httpx.TransportError, httpx.StreamError):
            return fallback
        if self._error_message is not None:
            message = self._error_message(body)
            if message:
                return message
        return fallback

    def _delay_for(self, error: ApiRetryableError, attempt: int) -> float:
        if isinstance(error, ApiRateLimitError):
            return self.policy.throttle_delay(attempt, error.retry_after)
        return self.policy.backoff(attempt)
