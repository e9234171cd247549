"""
Exceptions for the Firecrawl SDK.

All errors raised by the SDK derive from FirecrawlError, so callers can catch
every SDK failure with a single except clause or target a specific category.
"""

from typing import Any, Optional


class FirecrawlError(Exception):
    """Base class for Firecrawl SDK exceptions."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Any = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message


class ConfigError(FirecrawlError):
    """
    Exception raised when the client configuration is invalid.

    Raised when no API key can be resolved, or when an unknown
    configuration field is passed to load_config().
    """

    pass


class RequestError(FirecrawlError):
    """
    Exception raised when the API answers with a terminal HTTP error.

    Carries the HTTP status code, the server error code and any details
    the API returned alongside the message.
    """

    pass


class AuthenticationError(RequestError):
    """Exception raised when the API rejects the API key (HTTP 401)."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Any = None):
        super().__init__(message, 401, error_code, details)


class RateLimitError(RequestError):
    """
    Exception raised when the API rate limit is hit (HTTP 429).

    The SDK does not retry these automatically; callers may back off and
    try again themselves.
    """

    def __init__(self, message: str, error_code: Optional[str] = None, details: Any = None):
        super().__init__(message, 429, error_code, details)


class TransportError(FirecrawlError):
    """Exception raised when a request keeps failing at the network level."""

    pass


class JobTimeoutError(FirecrawlError):
    """
    Exception raised when an async job does not finish in time.

    The remote job is left running; use the matching cancel operation to
    stop it.
    """

    def __init__(self, job_id: str, timeout: float, job_kind: str):
        self.job_id = job_id
        self.timeout = timeout
        self.job_kind = job_kind
        super().__init__(
            f"{job_kind} job {job_id} did not complete within {timeout:g} seconds"
        )
