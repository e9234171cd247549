"""
Polling of asynchronous Firecrawl jobs.

Crawl, batch scrape and agent jobs share one polling loop. A JobPoller is
parameterized by a job kind label, the coroutine that fetches a job's status
and, for paginated jobs, the coroutine that fetches a page by absolute URL.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from .exceptions import JobTimeoutError

logger = logging.getLogger(__name__)

JobT = TypeVar("JobT")
PageT = TypeVar("PageT")


def _job_is_done(job: Any) -> bool:
    return bool(job.is_done)


async def follow_pagination(job: PageT, fetch_page: Callable[[str], Awaitable[PageT]]) -> PageT:
    """
    Collect every page of a finished job into the job itself.

    Pages are fetched by following each page's ``next`` URL until it is
    missing or empty. Their ``data`` is appended to ``job.data`` in arrival
    order; pages without data only advance the cursor.

    Args:
        job: First page of a finished job; its ``data`` is extended in place
        fetch_page: Coroutine fetching a page by absolute URL

    Returns:
        The same job object, holding the data of all pages
    """
    if job.data is None:
        job.data = []

    current = job
    pages = 1
    while current.next:
        logger.debug(f"Fetching results page {pages + 1}: {current.next}")
        page = await fetch_page(current.next)
        if page.data:
            job.data.extend(page.data)
        current = page
        pages += 1

    if pages > 1:
        logger.debug(f"Collected {len(job.data)} results from {pages} pages")
    return job


class JobPoller(Generic[JobT]):
    """
    Polls an async job until it reaches a terminal status or times out.

    A local timeout does not cancel the job on the server.
    """

    def __init__(
        self,
        kind: str,
        fetch_status: Callable[[str], Awaitable[JobT]],
        fetch_page: Optional[Callable[[str], Awaitable[JobT]]] = None,
        is_done: Optional[Callable[[JobT], bool]] = None,
    ):
        """
        Initialize the poller.

        Args:
            kind: Job kind used in messages, e.g. "Crawl"
            fetch_status: Coroutine fetching a job's status by id
            fetch_page: Coroutine fetching a results page by absolute URL;
                        when None, finished jobs are returned without pagination
            is_done: Terminal predicate; defaults to the job's ``is_done`` property
        """
        self.kind = kind
        self.fetch_status = fetch_status
        self.fetch_page = fetch_page
        self.is_done = is_done or _job_is_done

    async def poll_until_done(
        self, job_id: str, poll_interval: float = 2.0, timeout: float = 300.0
    ) -> JobT:
        """
        Poll a job until it is done.

        Args:
            job_id: Server-assigned job id
            poll_interval: Seconds between status checks
            timeout: Seconds to wait before giving up

        Returns:
            The finished job, with all result pages collected when paginated

        Raises:
            JobTimeoutError: If the job is not done before the deadline
        """
        deadline = time.monotonic() + timeout
        checks = 0

        while time.monotonic() < deadline:
            job = await self.fetch_status(job_id)
            checks += 1
            if self.is_done(job):
                logger.debug(
                    f"{self.kind} job {job_id} finished with status "
                    f"{getattr(job, 'status', None)!r} after {checks} checks"
                )
                if self.fetch_page is not None:
                    job = await follow_pagination(job, self.fetch_page)
                return job

            logger.debug(
                f"{self.kind} job {job_id} is {getattr(job, 'status', None)!r}, "
                f"checking again in {poll_interval:g}s"
            )
            await asyncio.sleep(poll_interval)

        logger.error(f"{self.kind} job {job_id} did not complete within {timeout:g} seconds")
        raise JobTimeoutError(job_id, timeout, self.kind)
