"""Remote API client exceptions."""

BODY_PREVIEW_CHARS = 500


class ApiClientError(Exception):
    """Base exception for remote API client errors."""

    pass


class ApiRetryableError(ApiClientError):
    """Base class for errors the request executor retries.

    Subclasses are caught by the executor's retry loop; once the retry
    budget is spent the last one is raised to the caller unchanged.
    """

    pass


class ApiTransportError(ApiRetryableError):
    """Raised when the request could not be sent or the body could not be read."""

    pass


class ApiRateLimitError(ApiRetryableError):
    """Raised when the server signals throttling (429, or 503 for Syoboi)."""

    def __init__(
        self,
        message: str,
        status_code: int,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.retry_after = retry_after


class ApiDecodeError(ApiRetryableError):
    """Raised when a response body cannot be decoded.

    Carries a preview of the raw body so the failure can be diagnosed
    from logs alone.
    """

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.body_length = len(body)
        self.body_preview = body[:BODY_PREVIEW_CHARS]

    def __str__(self) -> str:
        base = super().__str__()
        if not self.body_preview:
            return base
        return f"{base} (len={self.body_length}): {self.body_preview}"


class ApiResultError(ApiDecodeError):
    """Raised when a decoded body carries an application error code."""

    def __init__(self, message: str, code: str, detail: str | None = None, body: str = "") -> None:
        super().__init__(message, body)
        self.code = code
        self.detail = detail


class ApiStatusError(ApiClientError):
    """Raised for a non-success HTTP status that is not retried."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"HTTP {status_code}: {message}")
        self.status_code = status_code
        self.message = message
