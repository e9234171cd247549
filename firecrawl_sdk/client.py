"""
Client implementation for the Firecrawl SDK.

This module provides an asyncio client for the Firecrawl v2 API: scraping,
crawling, batch scraping, mapping, search, agent tasks and browser sessions.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .config import ClientConfig, load_config
from .exceptions import ConfigError, FirecrawlError
from .models import (AgentOptions, AgentResponse, AgentStatusResponse,
                     BatchScrapeJob, BatchScrapeOptions, BatchScrapeResponse,
                     BrowserCreateResponse, BrowserDeleteResponse,
                     BrowserExecuteResponse, BrowserListResponse,
                     ConcurrencyCheck, CrawlJob, CrawlOptions, CrawlResponse,
                     CreditUsage, Document, MapData, MapOptions, ScrapeOptions,
                     SearchData, SearchOptions)
from .payloads import build_batch_scrape_request, merge_options
from .polling import JobPoller
from .retry import RetryPolicy
from .transport import HttpTransport, unwrap_data

logger = logging.getLogger(__name__)

BROWSER_LANGUAGES = ("bash", "node", "python")
BROWSER_STATUSES = ("active", "destroyed")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _require(value: Any, name: str) -> None:
    """Raise ValueError if a required argument is missing or empty."""
    if value is None:
        raise ValueError(f"{name} is required")
    if isinstance(value, str) and not value.strip():
        raise ValueError(f"{name} is required")
    if isinstance(value, (list, tuple)) and not value:
        raise ValueError(f"{name} is required")


def _check_range(value: Optional[int], name: str, low: int, high: int) -> None:
    if value is not None and not low <= value <= high:
        raise ValueError(f"{name} must be between {low} and {high} seconds, got {value}")


def _parse(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate a response payload, raising FirecrawlError if it does not fit the model."""
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise FirecrawlError(f"Unexpected {model.__name__} response: {e}", details=payload) from e


class AsyncFirecrawlClient:
    """
    Asynchronous client for the Firecrawl API.

    Usage::

        async with AsyncFirecrawlClient(api_key="fc-...") as client:
            doc = await client.scrape("https://example.com")
            job = await client.crawl("https://example.com", CrawlOptions(limit=10))
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        backoff_factor: Optional[float] = None,
        poll_interval: Optional[float] = None,
        job_timeout: Optional[float] = None,
        config: Optional[ClientConfig] = None,
    ):
        """
        Initialize the client.

        Arguments left as None fall back to the environment and then to the
        defaults of ClientConfig.

        Args:
            api_key: API key; defaults to FIRECRAWL_API_KEY
            api_url: Base URL; defaults to FIRECRAWL_API_URL or https://api.firecrawl.dev
            timeout: HTTP request timeout in seconds
            max_retries: Retries for transient failures
            backoff_factor: Exponential backoff factor in seconds
            poll_interval: Default seconds between job status checks
            job_timeout: Default seconds to wait for a job
            config: Complete configuration; when given, the other arguments are ignored

        Raises:
            ConfigError: If no API key can be resolved
        """
        if config is None:
            config = load_config(
                api_key=api_key,
                api_url=api_url,
                timeout=timeout,
                max_retries=max_retries,
                backoff_factor=backoff_factor,
                poll_interval=poll_interval,
                job_timeout=job_timeout,
            )
        elif not config.api_key:
            raise ConfigError("API key is required")

        self.config = config
        self.transport = HttpTransport(
            api_key=config.api_key,
            base_url=config.api_url,
            timeout=config.timeout,
            retry_policy=RetryPolicy(config.max_retries, config.backoff_factor),
        )
        self._crawl_poller = JobPoller("Crawl", self.get_crawl_status, self._get_crawl_page)
        self._batch_poller = JobPoller(
            "Batch scrape", self.get_batch_scrape_status, self._get_batch_scrape_page
        )
        self._agent_poller = JobPoller("Agent", self.get_agent_status)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.transport.close()

    async def __aenter__(self) -> "AsyncFirecrawlClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()

    def _poll_settings(
        self, poll_interval: Optional[float], timeout: Optional[float]
    ) -> Tuple[float, float]:
        return (
            poll_interval if poll_interval is not None else self.config.poll_interval,
            timeout if timeout is not None else self.config.job_timeout,
        )

    # ------------------------------------------------------------------
    # Scrape
    # ------------------------------------------------------------------

    async def scrape(self, url: str, options: Optional[ScrapeOptions] = None) -> Document:
        """
        Scrape a single URL.

        Args:
            url: URL to scrape
            options: Scrape options

        Returns:
            The scraped document
        """
        _require(url, "URL")
        body = merge_options({"url": url}, options)
        payload = await self.transport.post("/v2/scrape", body)
        return _parse(Document, unwrap_data(payload))

    # ------------------------------------------------------------------
    # Crawl
    # ------------------------------------------------------------------

    async def start_crawl(self, url: str, options: Optional[CrawlOptions] = None) -> CrawlResponse:
        """
        Start a crawl job and return without waiting for it.

        Args:
            url: URL to start crawling from
            options: Crawl options

        Returns:
            Reference to the started job
        """
        _require(url, "URL")
        body = merge_options({"url": url}, options)
        payload = await self.transport.post("/v2/crawl", body)
        return _parse(CrawlResponse, payload)

    async def get_crawl_status(self, job_id: str) -> CrawlJob:
        """Get the status and first page of results of a crawl job."""
        _require(job_id, "Job ID")
        return _parse(CrawlJob, await self.transport.get(f"/v2/crawl/{job_id}"))

    async def _get_crawl_page(self, next_url: str) -> CrawlJob:
        return _parse(CrawlJob, await self.transport.get(next_url))

    async def crawl(
        self,
        url: str,
        options: Optional[CrawlOptions] = None,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> CrawlJob:
        """
        Crawl a website and wait for the job to finish.

        Args:
            url: URL to start crawling from
            options: Crawl options
            poll_interval: Seconds between status checks
            timeout: Seconds to wait before raising JobTimeoutError

        Returns:
            The finished crawl job with the documents of every results page
        """
        start = await self.start_crawl(url, options)
        if not start.id:
            raise FirecrawlError("Crawl start did not return a job ID")
        return await self._crawl_poller.poll_until_done(
            start.id, *self._poll_settings(poll_interval, timeout)
        )

    async def cancel_crawl(self, job_id: str) -> Dict[str, Any]:
        """Ask the server to cancel a crawl job."""
        _require(job_id, "Job ID")
        return await self.transport.delete(f"/v2/crawl/{job_id}")

    async def get_crawl_errors(self, job_id: str) -> Dict[str, Any]:
        """Get the errors recorded for a crawl job."""
        _require(job_id, "Job ID")
        return await self.transport.get(f"/v2/crawl/{job_id}/errors")

    # ------------------------------------------------------------------
    # Batch scrape
    # ------------------------------------------------------------------

    async def start_batch_scrape(
        self, urls: List[str], options: Optional[BatchScrapeOptions] = None
    ) -> BatchScrapeResponse:
        """
        Start a batch scrape job and return without waiting for it.

        Args:
            urls: URLs to scrape
            options: Batch scrape options; an idempotency key is sent as a header

        Returns:
            Reference to the started job
        """
        _require(urls, "URLs list")
        body, headers = build_batch_scrape_request(urls, options)
        payload = await self.transport.post("/v2/batch/scrape", body, headers=headers)
        return _parse(BatchScrapeResponse, payload)

    async def get_batch_scrape_status(self, job_id: str) -> BatchScrapeJob:
        """Get the status and first page of results of a batch scrape job."""
        _require(job_id, "Job ID")
        return _parse(BatchScrapeJob, await self.transport.get(f"/v2/batch/scrape/{job_id}"))

    async def _get_batch_scrape_page(self, next_url: str) -> BatchScrapeJob:
        return _parse(BatchScrapeJob, await self.transport.get(next_url))

    async def batch_scrape(
        self,
        urls: List[str],
        options: Optional[BatchScrapeOptions] = None,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> BatchScrapeJob:
        """
        Scrape many URLs as one job and wait for it to finish.

        Args:
            urls: URLs to scrape
            options: Batch scrape options
            poll_interval: Seconds between status checks
            timeout: Seconds to wait before raising JobTimeoutError

        Returns:
            The finished batch job with the documents of every results page
        """
        start = await self.start_batch_scrape(urls, options)
        if not start.id:
            raise FirecrawlError("Batch scrape start did not return a job ID")
        return await self._batch_poller.poll_until_done(
            start.id, *self._poll_settings(poll_interval, timeout)
        )

    async def cancel_batch_scrape(self, job_id: str) -> Dict[str, Any]:
        """Ask the server to cancel a batch scrape job."""
        _require(job_id, "Job ID")
        return await self.transport.delete(f"/v2/batch/scrape/{job_id}")

    # ------------------------------------------------------------------
    # Map and search
    # ------------------------------------------------------------------

    async def map(self, url: str, options: Optional[MapOptions] = None) -> MapData:
        """
        Discover the URLs of a website.

        Links come back as MapLink objects whether the server sent plain
        strings or link objects.
        """
        _require(url, "URL")
        body = merge_options({"url": url}, options)
        payload = await self.transport.post("/v2/map", body)
        return _parse(MapData, unwrap_data(payload))

    async def search(self, query: str, options: Optional[SearchOptions] = None) -> SearchData:
        """Run a web search; results are grouped into web, news and images."""
        _require(query, "Query")
        body = merge_options({"query": query}, options)
        payload = await self.transport.post("/v2/search", body)
        return _parse(SearchData, unwrap_data(payload))

    # ------------------------------------------------------------------
    # Agent
    # ------------------------------------------------------------------

    async def start_agent(self, options: AgentOptions) -> AgentResponse:
        """Start an agent task and return without waiting for it."""
        _require(options, "Agent options")
        payload = await self.transport.post("/v2/agent", options.to_payload())
        return _parse(AgentResponse, payload)

    async def get_agent_status(self, job_id: str) -> AgentStatusResponse:
        """Get the status of an agent task."""
        _require(job_id, "Job ID")
        return _parse(AgentStatusResponse, await self.transport.get(f"/v2/agent/{job_id}"))

    async def agent(
        self,
        options: AgentOptions,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> AgentStatusResponse:
        """
        Run an agent task and wait for it to finish.

        Args:
            options: Agent options
            poll_interval: Seconds between status checks
            timeout: Seconds to wait before raising JobTimeoutError

        Returns:
            The final agent status, including its data
        """
        start = await self.start_agent(options)
        if not start.id:
            raise FirecrawlError("Agent start did not return a job ID")
        return await self._agent_poller.poll_until_done(
            start.id, *self._poll_settings(poll_interval, timeout)
        )

    async def cancel_agent(self, job_id: str) -> Dict[str, Any]:
        """Ask the server to cancel an agent task."""
        _require(job_id, "Job ID")
        return await self.transport.delete(f"/v2/agent/{job_id}")

    # ------------------------------------------------------------------
    # Browser sessions
    # ------------------------------------------------------------------

    async def browser(
        self,
        ttl: Optional[int] = None,
        activity_ttl: Optional[int] = None,
        stream_web_view: Optional[bool] = None,
    ) -> BrowserCreateResponse:
        """
        Create a remote browser session.

        Args:
            ttl: Total session lifetime in seconds (30-3600)
            activity_ttl: Idle timeout in seconds (10-3600)
            stream_web_view: Whether to enable the live view stream

        Returns:
            Session details, including its CDP and live view URLs
        """
        _check_range(ttl, "ttl", 30, 3600)
        _check_range(activity_ttl, "activity_ttl", 10, 3600)
        body: Dict[str, Any] = {}
        if ttl is not None:
            body["ttl"] = ttl
        if activity_ttl is not None:
            body["activityTtl"] = activity_ttl
        if stream_web_view is not None:
            body["streamWebView"] = stream_web_view
        payload = await self.transport.post("/v2/browser", body)
        return _parse(BrowserCreateResponse, payload)

    async def browser_execute(
        self,
        session_id: str,
        code: str,
        language: str = "bash",
        timeout: Optional[int] = None,
    ) -> BrowserExecuteResponse:
        """
        Execute code in a browser session.

        Args:
            session_id: Browser session id
            code: Code to run
            language: One of "bash", "node" or "python"
            timeout: Execution timeout in seconds

        Returns:
            Output streams, result and exit code of the execution
        """
        _require(session_id, "Session ID")
        _require(code, "Code")
        language = language or "bash"
        if language not in BROWSER_LANGUAGES:
            raise ValueError(f"language must be one of {', '.join(BROWSER_LANGUAGES)}, got {language!r}")
        body: Dict[str, Any] = {"code": code, "language": language}
        if timeout is not None:
            body["timeout"] = timeout
        payload = await self.transport.post(f"/v2/browser/{session_id}/execute", body)
        return _parse(BrowserExecuteResponse, payload)

    async def delete_browser(self, session_id: str) -> BrowserDeleteResponse:
        """Delete a browser session."""
        _require(session_id, "Session ID")
        payload = await self.transport.delete(f"/v2/browser/{session_id}")
        return _parse(BrowserDeleteResponse, payload)

    async def list_browsers(self, status: Optional[str] = None) -> BrowserListResponse:
        """List browser sessions, optionally only "active" or "destroyed" ones."""
        params = None
        if status:
            if status not in BROWSER_STATUSES:
                raise ValueError(f"status must be one of {', '.join(BROWSER_STATUSES)}, got {status!r}")
            params = {"status": status}
        payload = await self.transport.get("/v2/browser", params=params)
        return _parse(BrowserListResponse, payload)

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------

    async def get_concurrency(self) -> ConcurrencyCheck:
        payload = await self.transport.get("/v2/concurrency-check")
        return _parse(ConcurrencyCheck, unwrap_data(payload))

    async def get_credit_usage(self) -> CreditUsage:
        payload = await self.transport.get("/v2/team/credit-usage")
        return _parse(CreditUsage, unwrap_data(payload))
