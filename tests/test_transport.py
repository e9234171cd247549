"""
Tests for the HTTP transport: headers, error translation and retries.
"""

import asyncio
import json
import logging
from typing import Any, List
from unittest import mock

import aiohttp
import pytest

from firecrawl_sdk.exceptions import (AuthenticationError, FirecrawlError,
                                      RateLimitError, RequestError,
                                      TransportError)
from firecrawl_sdk.retry import RetryPolicy
from firecrawl_sdk.transport import HttpRequest, HttpTransport, unwrap_data

BASE_URL = "https://api.test.dev"


# Mock response for session requests
class MockResponse:
    def __init__(self, data: Any, status: int = 200):
        self.data = data
        self.status = status

    async def json(self) -> Any:
        return self.data

    async def text(self) -> str:
        if isinstance(self.data, str):
            return self.data
        return json.dumps(self.data)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


def mock_session(responses: List[Any]) -> mock.MagicMock:
    """Create a session whose requests yield the given responses or raise the given errors."""
    session = mock.MagicMock()
    session.closed = False
    session.request = mock.MagicMock(side_effect=responses)
    return session


@pytest.fixture
def transport():
    """Create a transport whose backoff sleeps are mocked out."""
    transport = HttpTransport(
        api_key="test_api_key",
        base_url=BASE_URL + "/",
        retry_policy=RetryPolicy(max_retries=3, backoff_factor=0.5),
    )
    transport.retry_policy.wait = mock.AsyncMock()
    return transport


@pytest.mark.asyncio
async def test_successful_request(transport):
    """Test a successful POST with the standard headers."""
    transport.session = mock_session([MockResponse({"success": True, "data": {"markdown": "# Hi"}})])

    response = await transport.execute(
        HttpRequest(method="POST", url="/v2/scrape", json_body={"url": "https://example.com"})
    )

    assert response.status == 200
    assert response.payload == {"success": True, "data": {"markdown": "# Hi"}}

    # Verify the request that was sent
    args, kwargs = transport.session.request.call_args
    assert args == ("POST", f"{BASE_URL}/v2/scrape")
    assert kwargs["headers"]["Authorization"] == "Bearer test_api_key"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert json.loads(kwargs["data"]) == {"url": "https://example.com"}


@pytest.mark.asyncio
async def test_absolute_url_is_used_verbatim(transport):
    transport.session = mock_session([MockResponse({"status": "completed"})])
    next_url = "https://other.test.dev/v2/crawl/abc?skip=10"

    await transport.get(next_url)

    args, kwargs = transport.session.request.call_args
    assert args == ("GET", next_url)
    assert kwargs["headers"]["Authorization"] == "Bearer test_api_key"
    assert kwargs["data"] is None


@pytest.mark.asyncio
async def test_extra_headers_are_sent(transport):
    transport.session = mock_session([MockResponse({"id": "b1"})])

    await transport.post("/v2/batch/scrape", {"urls": ["https://a.com"]}, headers={"x-idempotency-key": "k1"})

    _, kwargs = transport.session.request.call_args
    assert kwargs["headers"]["x-idempotency-key"] == "k1"
    assert "k1" not in kwargs["data"]


@pytest.mark.asyncio
async def test_query_params_are_sent(transport):
    transport.session = mock_session([MockResponse({"sessions": []})])

    await transport.get("/v2/browser", params={"status": "active"})

    _, kwargs = transport.session.request.call_args
    assert kwargs["params"] == {"status": "active"}


@pytest.mark.asyncio
async def test_authentication_error_is_not_retried(transport):
    transport.session = mock_session([MockResponse({"error": "Invalid token", "code": "UNAUTHORIZED"}, 401)])

    with pytest.raises(AuthenticationError) as exc_info:
        await transport.get("/v2/team/credit-usage")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid token"
    assert exc_info.value.error_code == "UNAUTHORIZED"
    assert transport.session.request.call_count == 1
    transport.retry_policy.wait.assert_not_awaited()


@pytest.mark.asyncio
async def test_rate_limit_error_is_not_retried(transport):
    transport.session = mock_session([MockResponse({"error": "Rate limit exceeded"}, 429)])

    with pytest.raises(RateLimitError) as exc_info:
        await transport.post("/v2/scrape", {"url": "https://example.com"})

    assert exc_info.value.status_code == 429
    assert transport.session.request.call_count == 1
    transport.retry_policy.wait.assert_not_awaited()


@pytest.mark.parametrize("status", [400, 402, 403, 404, 422])
@pytest.mark.asyncio
async def test_client_errors_fail_on_first_attempt(transport, status):
    transport.session = mock_session(
        [MockResponse({"error": "Bad request", "code": "BAD", "details": [{"field": "url"}]}, status)]
    )

    with pytest.raises(RequestError) as exc_info:
        await transport.post("/v2/scrape", {"url": "nope"})

    error = exc_info.value
    assert exc_info.type is RequestError
    assert error.status_code == status
    assert error.message == "Bad request"
    assert error.error_code == "BAD"
    assert error.details == [{"field": "url"}]
    assert transport.session.request.call_count == 1


@pytest.mark.asyncio
async def test_error_message_falls_back_to_message_field(transport):
    transport.session = mock_session([MockResponse({"message": "Not here"}, 404)])

    with pytest.raises(RequestError) as exc_info:
        await transport.get("/v2/crawl/missing")

    assert exc_info.value.message == "Not here"


@pytest.mark.asyncio
async def test_error_message_for_non_json_body(transport):
    transport.session = mock_session([MockResponse("<html>Not Found</html>", 404)])

    with pytest.raises(RequestError) as exc_info:
        await transport.get("/v2/crawl/missing")

    assert exc_info.value.message == "HTTP 404 error"
    assert exc_info.value.error_code is None


@pytest.mark.parametrize("status", [408, 409, 500, 502, 503, 504])
@pytest.mark.asyncio
async def test_retryable_statuses_exhaust_retries(transport, status):
    """A retryable status is attempted 1 + max_retries times before failing."""
    transport.session = mock_session([MockResponse({"error": "Try again"}, status) for _ in range(4)])

    with pytest.raises(RequestError) as exc_info:
        await transport.get("/v2/crawl/abc")

    assert exc_info.value.status_code == status
    assert exc_info.value.message == "Try again"
    assert transport.session.request.call_count == 4
    assert [c.args[0] for c in transport.retry_policy.wait.await_args_list] == [1, 2, 3]


@pytest.mark.asyncio
async def test_retry_then_success(transport):
    transport.session = mock_session(
        [MockResponse({"error": "Bad gateway"}, 502), MockResponse({"status": "completed"})]
    )

    payload = await transport.get("/v2/crawl/abc")

    assert payload == {"status": "completed"}
    assert transport.session.request.call_count == 2
    transport.retry_policy.wait.assert_awaited_once_with(1)


@pytest.mark.asyncio
async def test_network_errors_exhaust_retries(transport):
    transport.session = mock_session([aiohttp.ClientConnectionError("connection refused") for _ in range(4)])

    with pytest.raises(TransportError) as exc_info:
        await transport.get("/v2/concurrency-check")

    assert isinstance(exc_info.value.__cause__, aiohttp.ClientConnectionError)
    assert transport.session.request.call_count == 4
    assert transport.retry_policy.wait.await_count == 3


@pytest.mark.asyncio
async def test_timeout_then_success(transport):
    transport.session = mock_session([asyncio.TimeoutError(), MockResponse({"concurrency": 1})])

    payload = await transport.get("/v2/concurrency-check")

    assert payload == {"concurrency": 1}
    assert transport.session.request.call_count == 2


@pytest.mark.asyncio
async def test_no_retries_when_max_retries_is_zero(transport):
    transport.retry_policy.max_retries = 0
    transport.session = mock_session([MockResponse({"error": "Unavailable"}, 503)])

    with pytest.raises(RequestError):
        await transport.get("/v2/crawl/abc")

    assert transport.session.request.call_count == 1
    transport.retry_policy.wait.assert_not_awaited()


@pytest.mark.asyncio
async def test_serialization_failure_is_not_sent(transport):
    transport.session = mock_session([])

    with pytest.raises(FirecrawlError, match="serialize"):
        await transport.post("/v2/scrape", {"url": object()})

    transport.session.request.assert_not_called()


@pytest.mark.asyncio
async def test_empty_success_body(transport):
    transport.session = mock_session([MockResponse("", 200)])

    assert await transport.delete("/v2/crawl/abc") == {}


@pytest.mark.asyncio
async def test_unparsable_success_body(transport):
    transport.session = mock_session([MockResponse("not json", 200)])

    with pytest.raises(FirecrawlError, match="parse"):
        await transport.get("/v2/crawl/abc")


@pytest.mark.asyncio
async def test_backoff_sleep_is_cancellable():
    """Cancelling the caller interrupts a pending backoff sleep."""
    transport = HttpTransport(
        api_key="test_api_key",
        base_url=BASE_URL,
        retry_policy=RetryPolicy(max_retries=3, backoff_factor=10.0),
    )
    transport.session = mock_session([MockResponse({"error": "Unavailable"}, 503) for _ in range(4)])

    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(transport.get("/v2/crawl/abc"), timeout=0.1)

    assert transport.session.request.call_count == 1


@pytest.mark.asyncio
async def test_close_releases_session(transport):
    session = mock_session([])
    session.close = mock.AsyncMock()
    transport.session = session

    await transport.close()

    session.close.assert_awaited_once()
    assert transport.session is None


def test_request_is_immutable():
    request = HttpRequest(method="GET", url="/v2/crawl/abc")

    with pytest.raises(Exception):
        request.url = "/v2/crawl/other"


def test_unwrap_data():
    assert unwrap_data({"success": True, "data": {"links": []}}) == {"links": []}
    assert unwrap_data({"concurrency": 2}) == {"concurrency": 2}
    assert unwrap_data({"data": None, "id": "x"}) == {"data": None, "id": "x"}


@pytest.mark.asyncio
async def test_each_retry_is_logged_once(transport, caplog):
    transport.session = mock_session(
        [MockResponse({"error": "Unavailable"}, 503), MockResponse({"status": "completed"})]
    )

    with caplog.at_level(logging.INFO, logger="firecrawl_sdk"):
        await transport.get("/v2/crawl/abc")

    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING
    assert "HTTP 503" in caplog.records[0].getMessage()
    assert "retrying in 0.5s" in caplog.records[0].getMessage()
