"""
Synchronous client implementation for the Firecrawl SDK.

This module provides a blocking wrapper around the asynchronous client for
users who prefer a traditional API over asyncio. The async client runs on a
private event loop in a background thread, so the client can be shared by
many threads: each call blocks only the thread that made it, and all calls
share one connection pool.

Every long-running operation also has an ``*_async`` variant returning a
``concurrent.futures.Future``.
"""

import asyncio
import logging
import threading
from concurrent.futures import Executor, Future
from typing import Any, Coroutine, Dict, List, Optional

from .client import AsyncFirecrawlClient
from .config import ClientConfig
from .models import (AgentOptions, AgentResponse, AgentStatusResponse,
                     BatchScrapeJob, BatchScrapeOptions, BatchScrapeResponse,
                     BrowserCreateResponse, BrowserDeleteResponse,
                     BrowserExecuteResponse, BrowserListResponse,
                     ConcurrencyCheck, CrawlJob, CrawlOptions, CrawlResponse,
                     CreditUsage, Document, MapData, MapOptions, ScrapeOptions,
                     SearchData, SearchOptions)

logger = logging.getLogger(__name__)


class FirecrawlClient:
    """
    Synchronous client for the Firecrawl API.

    Usage::

        with FirecrawlClient(api_key="fc-...") as client:
            doc = client.scrape("https://example.com")
            future = client.crawl_async("https://example.com", CrawlOptions(limit=10))
            job = future.result()
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
        executor: Optional[Executor] = None,
    ):
        """
        Initialize the synchronous client.

        Args:
            api_key: API key; defaults to FIRECRAWL_API_KEY
            api_url: Base URL; defaults to FIRECRAWL_API_URL or https://api.firecrawl.dev
            timeout: HTTP request timeout in seconds
            max_retries: Retries for transient failures
            backoff_factor: Exponential backoff factor in seconds
            poll_interval: Default seconds between job status checks
            job_timeout: Default seconds to wait for a job
            config: Complete configuration; when given, the other settings are ignored
            executor: Worker pool for the ``*_async`` variants; by default they
                      run directly on the client's event loop
        """
        self._async_client = AsyncFirecrawlClient(
            api_key=api_key,
            api_url=api_url,
            timeout=timeout,
            max_retries=max_retries,
            backoff_factor=backoff_factor,
            poll_interval=poll_interval,
            job_timeout=job_timeout,
            config=config,
        )
        self._executor = executor
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()

    @property
    def config(self) -> ClientConfig:
        return self._async_client.config

    def _ensure_loop(self) -> asyncio.AbstractEventLoop:
        """Start the background event loop on first use."""
        with self._lock:
            if self._loop is None:
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever, name="firecrawl-sdk-loop", daemon=True
                )
                self._thread.start()
                logger.debug("Started Firecrawl client event loop")
            return self._loop

    def _submit(self, coro: Coroutine[Any, Any, Any]) -> Future:
        return asyncio.run_coroutine_threadsafe(coro, self._ensure_loop())

    def _run_async(self, coro: Coroutine[Any, Any, Any]) -> Any:
        """
        Run an asynchronous coroutine and block until it finishes.

        Args:
            coro: Coroutine to run

        Returns:
            Result of the coroutine
        """
        return self._submit(coro).result()

    def _future(self, name: str, *args: Any, **kwargs: Any) -> Future:
        """Start an operation in the background and return its future."""
        if self._executor is not None:
            return self._executor.submit(getattr(self, name), *args, **kwargs)
        return self._submit(getattr(self._async_client, name)(*args, **kwargs))

    async def _shutdown(self) -> None:
        """Cancel in-flight operations, then close the HTTP session."""
        current = asyncio.current_task()
        pending = [task for task in asyncio.all_tasks() if task is not current]
        if pending:
            logger.debug(f"Cancelling {len(pending)} pending operations")
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
        await self._async_client.close()

    def close(self) -> None:
        """
        Close the client session and stop the background loop.

        Operations still running in other threads are cancelled; their
        callers get concurrent.futures.CancelledError.
        """
        with self._lock:
            loop, thread = self._loop, self._thread
            self._loop = None
            self._thread = None
        if loop is None:
            return
        try:
            asyncio.run_coroutine_threadsafe(self._shutdown(), loop).result()
        finally:
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()

    def __enter__(self) -> "FirecrawlClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Scrape, map and search
    # ------------------------------------------------------------------

    def scrape(self, url: str, options: Optional[ScrapeOptions] = None) -> Document:
        """
        Scrape a single URL.

        Args:
            url: URL to scrape
            options: Scrape options

        Returns:
            The scraped document
        """
        return self._run_async(self._async_client.scrape(url, options))

    def map(self, url: str, options: Optional[MapOptions] = None) -> MapData:
        """Discover the URLs of a website."""
        return self._run_async(self._async_client.map(url, options))

    def search(self, query: str, options: Optional[SearchOptions] = None) -> SearchData:
        """Run a web search."""
        return self._run_async(self._async_client.search(query, options))

    # ------------------------------------------------------------------
    # Crawl
    # ------------------------------------------------------------------

    def start_crawl(self, url: str, options: Optional[CrawlOptions] = None) -> CrawlResponse:
        return self._run_async(self._async_client.start_crawl(url, options))

    def get_crawl_status(self, job_id: str) -> CrawlJob:
        return self._run_async(self._async_client.get_crawl_status(job_id))

    def crawl(
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
        return self._run_async(
            self._async_client.crawl(url, options, poll_interval=poll_interval, timeout=timeout)
        )

    def cancel_crawl(self, job_id: str) -> Dict[str, Any]:
        return self._run_async(self._async_client.cancel_crawl(job_id))

    def get_crawl_errors(self, job_id: str) -> Dict[str, Any]:
        return self._run_async(self._async_client.get_crawl_errors(job_id))

    # ------------------------------------------------------------------
    # Batch scrape
    # ------------------------------------------------------------------

    def start_batch_scrape(
        self, urls: List[str], options: Optional[BatchScrapeOptions] = None
    ) -> BatchScrapeResponse:
        return self._run_async(self._async_client.start_batch_scrape(urls, options))

    def get_batch_scrape_status(self, job_id: str) -> BatchScrapeJob:
        return self._run_async(self._async_client.get_batch_scrape_status(job_id))

    def batch_scrape(
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
        return self._run_async(
            self._async_client.batch_scrape(
                urls, options, poll_interval=poll_interval, timeout=timeout
            )
        )

    def cancel_batch_scrape(self, job_id: str) -> Dict[str, Any]:
        return self._run_async(self._async_client.cancel_batch_scrape(job_id))

    # ------------------------------------------------------------------
    # Agent
    # ------------------------------------------------------------------

    def start_agent(self, options: AgentOptions) -> AgentResponse:
        return self._run_async(self._async_client.start_agent(options))

    def get_agent_status(self, job_id: str) -> AgentStatusResponse:
        return self._run_async(self._async_client.get_agent_status(job_id))

    def agent(
        self,
        options: AgentOptions,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> AgentStatusResponse:
        """Run an agent task and wait for it to finish."""
        return self._run_async(
            self._async_client.agent(options, poll_interval=poll_interval, timeout=timeout)
        )

    def cancel_agent(self, job_id: str) -> Dict[str, Any]:
        return self._run_async(self._async_client.cancel_agent(job_id))

    # ------------------------------------------------------------------
    # Browser sessions
    # ------------------------------------------------------------------

    def browser(
        self,
        ttl: Optional[int] = None,
        activity_ttl: Optional[int] = None,
        stream_web_view: Optional[bool] = None,
    ) -> BrowserCreateResponse:
        """Create a remote browser session."""
        return self._run_async(self._async_client.browser(ttl, activity_ttl, stream_web_view))

    def browser_execute(
        self,
        session_id: str,
        code: str,
        language: str = "bash",
        timeout: Optional[int] = None,
    ) -> BrowserExecuteResponse:
        """Execute bash, node or python code in a browser session."""
        return self._run_async(
            self._async_client.browser_execute(session_id, code, language, timeout)
        )

    def delete_browser(self, session_id: str) -> BrowserDeleteResponse:
        return self._run_async(self._async_client.delete_browser(session_id))

    def list_browsers(self, status: Optional[str] = None) -> BrowserListResponse:
        return self._run_async(self._async_client.list_browsers(status))

    # ------------------------------------------------------------------
    # Usage
    # ------------------------------------------------------------------

    def get_concurrency(self) -> ConcurrencyCheck:
        return self._run_async(self._async_client.get_concurrency())

    def get_credit_usage(self) -> CreditUsage:
        return self._run_async(self._async_client.get_credit_usage())

    # ------------------------------------------------------------------
    # Future variants
    # ------------------------------------------------------------------

    def scrape_async(self, url: str, options: Optional[ScrapeOptions] = None) -> "Future[Document]":
        return self._future("scrape", url, options)

    def crawl_async(
        self,
        url: str,
        options: Optional[CrawlOptions] = None,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> "Future[CrawlJob]":
        return self._future("crawl", url, options, poll_interval=poll_interval, timeout=timeout)

    def batch_scrape_async(
        self,
        urls: List[str],
        options: Optional[BatchScrapeOptions] = None,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> "Future[BatchScrapeJob]":
        return self._future(
            "batch_scrape", urls, options, poll_interval=poll_interval, timeout=timeout
        )

    def map_async(self, url: str, options: Optional[MapOptions] = None) -> "Future[MapData]":
        return self._future("map", url, options)

    def search_async(
        self, query: str, options: Optional[SearchOptions] = None
    ) -> "Future[SearchData]":
        return self._future("search", query, options)

    def agent_async(
        self,
        options: AgentOptions,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> "Future[AgentStatusResponse]":
        return self._future("agent", options, poll_interval=poll_interval, timeout=timeout)

    def browser_async(
        self,
        ttl: Optional[int] = None,
        activity_ttl: Optional[int] = None,
        stream_web_view: Optional[bool] = None,
    ) -> "Future[BrowserCreateResponse]":
        return self._future("browser", ttl, activity_ttl, stream_web_view)

    def browser_execute_async(
        self,
        session_id: str,
        code: str,
        language: str = "bash",
        timeout: Optional[int] = None,
    ) -> "Future[BrowserExecuteResponse]":
        return self._future("browser_execute", session_id, code, language, timeout)

    def delete_browser_async(self, session_id: str) -> "Future[BrowserDeleteResponse]":
        return self._future("delete_browser", session_id)

    def list_browsers_async(self, status: Optional[str] = None) -> "Future[BrowserListResponse]":
        return self._future("list_browsers", status)
