"""Remote API client module.

This module provides:
- Exceptions: ApiClientError and its retryable/terminal subclasses
- Rate governing: RateGovernor, RateLimiterState
- Request execution: RequestExecutor, RetryPolicy

The service clients live in ``clients.syoboi`` and ``clients.tmdb``.
"""

from .exceptions import (
    ApiClientError,
    ApiDecodeError,
    ApiRateLimitError,
    ApiResultError,
    ApiRetryableError,
    ApiStatusError,
    ApiTransportError,
)
from .executor import RequestExecutor, RetryPolicy, parse_retry_after
from .rate_governor import RateGovernor, RateLimiterState

__all__ = [
    # Exceptions
    "ApiClientError",
    "ApiDecodeError",
    "ApiRateLimitError",
    "ApiResultError",
    "ApiRetryableError",
    "ApiStatusError",
    "ApiTransportError",
    # Rate governing
    "RateGovernor",
    "RateLimiterState",
    # Request execution
    "RequestExecutor",
    "RetryPolicy",
    "parse_retry_after",
]
