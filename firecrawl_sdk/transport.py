"""
HTTP transport for the Firecrawl API.

This module sends authenticated JSON requests over a shared aiohttp session
and applies the retry policy to transient failures. Error responses are
translated into the SDK exception hierarchy.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import aiohttp
from pydantic import BaseModel, ConfigDict, Field

from .exceptions import (AuthenticationError, FirecrawlError, RateLimitError,
                         RequestError, TransportError)
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


class HttpRequest(BaseModel):
    """An API request; immutable once built."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="HTTP method")
    url: str = Field(..., description="Path relative to the base URL, or an absolute URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="Extra headers")
    params: Optional[Dict[str, str]] = Field(None, description="Query parameters")
    json_body: Optional[Any] = Field(None, description="JSON-serializable request body")


class HttpResponse(BaseModel):
    """A successful API response."""

    status: int = Field(..., description="HTTP status code")
    body: str = Field("", description="Raw response body")
    payload: Any = Field(None, description="Parsed JSON body")


def unwrap_data(payload: Any) -> Any:
    """Return the ``data`` field of a response payload, or the payload itself."""
    if isinstance(payload, dict) and payload.get("data") is not None:
        return payload["data"]
    return payload


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None


def error_from_response(status: int, text: str) -> RequestError:
    """
    Build the exception for an error response.

    The message comes from the body's ``error`` field, then ``message``, and
    falls back to "HTTP <status> error". The server error code and details
    are kept when present.
    """
    message = f"HTTP {status} error"
    error_code = None
    details = None

    parsed = _parse_json(text)
    if isinstance(parsed, dict):
        if parsed.get("error") is not None:
            message = str(parsed["error"])
        elif parsed.get("message") is not None:
            message = str(parsed["message"])
        if parsed.get("code") is not None:
            error_code = str(parsed["code"])
        details = parsed.get("details")

    if status == 401:
        return AuthenticationError(message, error_code, details)
    if status == 429:
        return RateLimitError(message, error_code, details)
    return RequestError(message, status, error_code, details)


class HttpTransport:
    """
    Sends requests to the Firecrawl API with retries.

    One aiohttp session, and so one connection pool, is shared by every
    request made through the transport. It is created on first use and must
    be released with close().
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 300.0,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        """
        Initialize the transport.

        Args:
            api_key: API key sent as a bearer token
            base_url: Base URL for relative request paths
            timeout: Total timeout per HTTP attempt, in seconds
            retry_policy: Retry policy; defaults to 3 retries with a 0.5s backoff factor
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_policy = retry_policy or RetryPolicy()
        self.session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure that an HTTP session exists and return it."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self.session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self.session and not self.session.closed:
            await self.session.close()
        self.session = None

    def resolve_url(self, url: str) -> str:
        """Join a relative path to the base URL; absolute URLs pass through."""
        if url.startswith(("http://", "https://")):
            return url
        if not url.startswith("/"):
            url = "/" + url
        return f"{self.base_url}{url}"

    def build_headers(self, request: HttpRequest) -> Dict[str, str]:
        """Standard headers for every call, overlaid with the request's own."""
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        headers.update(request.headers)
        return headers

    async def execute(self, request: HttpRequest) -> HttpResponse:
        """
        Execute a request, retrying transient failures.

        Args:
            request: The request to send

        Returns:
            The successful response with its parsed JSON payload

        Raises:
            FirecrawlError: If the body cannot be serialized or a 2xx body is not JSON
            AuthenticationError: On HTTP 401
            RateLimitError: On HTTP 429
            RequestError: On other HTTP errors, or retryable ones after the last retry
            TransportError: On network failures after the last retry
        """
        data = None
        if request.json_body is not None:
            try:
                data = json.dumps(request.json_body)
            except (TypeError, ValueError) as e:
                raise FirecrawlError(f"Failed to serialize request body: {e}") from e

        url = self.resolve_url(request.url)
        headers = self.build_headers(request)
        session = await self._ensure_session()
        attempt = 0

        while True:
            logger.debug(f"{request.method} {url} (attempt {attempt + 1})")
            try:
                async with session.request(
                    request.method,
                    url,
                    params=request.params,
                    data=data,
                    headers=headers,
                ) as response:
                    status = response.status
                    text = await response.text()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                if self.retry_policy.should_retry(attempt):
                    attempt += 1
                    logger.warning(
                        f"Request to {url} failed: {e!r} "
                        f"(attempt {attempt}/{self.retry_policy.max_retries}, "
                        f"retrying in {self.retry_policy.compute_delay(attempt):g}s)"
                    )
                    await self.retry_policy.wait(attempt)
                    continue
                logger.error(
                    f"Request to {url} failed after {self.retry_policy.max_retries} retries: {e!r}"
                )
                raise TransportError(f"Request failed: {e}") from e

            if 200 <= status < 300:
                return HttpResponse(status=status, body=text, payload=self._parse_success(text, status))

            error = error_from_response(status, text)
            if not self.retry_policy.is_retryable_status(status):
                raise error
            if not self.retry_policy.should_retry(attempt):
                logger.error(
                    f"{request.method} {url} failed with HTTP {status} "
                    f"after {self.retry_policy.max_retries} retries"
                )
                raise error

            attempt += 1
            logger.warning(
                f"{request.method} {url} returned HTTP {status} "
                f"(attempt {attempt}/{self.retry_policy.max_retries}, "
                f"retrying in {self.retry_policy.compute_delay(attempt):g}s)"
            )
            await self.retry_policy.wait(attempt)

    @staticmethod
    def _parse_success(text: str, status: int) -> Any:
        if not text or not text.strip():
            return {}
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise FirecrawlError(
                f"Failed to parse JSON response: {text[:200]}", status_code=status
            ) from e

    async def get(self, url: str, params: Optional[Dict[str, str]] = None) -> Any:
        """GET a path or absolute URL and return the parsed payload."""
        response = await self.execute(HttpRequest(method="GET", url=url, params=params))
        return response.payload

    async def post(
        self, path: str, body: Any, headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """POST a JSON body and return the parsed payload."""
        response = await self.execute(
            HttpRequest(method="POST", url=path, json_body=body, headers=headers or {})
        )
        return response.payload

    async def delete(self, path: str) -> Any:
        """DELETE a path and return the parsed payload."""
        response = await self.execute(HttpRequest(method="DELETE", url=path))
        return response.payload
