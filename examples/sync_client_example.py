#!/usr/bin/env python
"""
Example script demonstrating how to use the Firecrawl SDK with the synchronous client.

This example scrapes a page, crawls a small site, runs a batch scrape in the
background through a future and prints the team's credit usage.
"""

import logging
import os
import sys
import uuid

# Add parent directory to path to import the SDK
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from firecrawl_sdk import (BatchScrapeOptions, CrawlOptions, FirecrawlClient,
                           FirecrawlError, JobTimeoutError, ScrapeOptions)

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def scrape_page(client, url):
    """
    Scrape a single page as markdown.

    Args:
        client: Initialized Firecrawl client
        url: URL of the page to scrape
    """
    logger.info(f"Scraping: {url}")
    doc = client.scrape(url, ScrapeOptions(formats=["markdown"], only_main_content=True))

    title = (doc.metadata or {}).get("title", "untitled")
    logger.info(f"Scraped '{title}' ({len(doc.markdown or '')} chars of markdown)")


def crawl_site(client, url):
    """
    Crawl a site and wait for every page.

    Args:
        client: Initialized Firecrawl client
        url: URL to start crawling from
    """
    logger.info(f"Crawling: {url}")
    options = CrawlOptions(
        limit=10,
        scrape_options=ScrapeOptions(formats=["markdown"]),
    )

    try:
        job = client.crawl(url, options, poll_interval=2, timeout=120)
    except JobTimeoutError as e:
        logger.warning(f"{e}; cancelling")
        client.cancel_crawl(e.job_id)
        return

    logger.info(f"Crawl {job.status}: {len(job.data)} pages, {job.credits_used} credits")
    for doc in job.data:
        logger.info(f"  {(doc.metadata or {}).get('sourceURL')}")


def batch_scrape_in_background(client, urls):
    """
    Start a batch scrape without blocking and collect it later.

    Args:
        client: Initialized Firecrawl client
        urls: URLs to scrape
    """
    options = BatchScrapeOptions(
        options=ScrapeOptions(formats=["markdown"]),
        idempotency_key=str(uuid.uuid4()),
    )
    future = client.batch_scrape_async(urls, options)

    logger.info("Batch scrape started, doing other work meanwhile")
    usage = client.get_credit_usage()
    logger.info(f"Remaining credits: {usage.remaining_credits}")

    job = future.result()
    logger.info(f"Batch scrape {job.status}: {len(job.data)} documents")


def main():
    """Main function to run the examples."""
    logger.info("Initializing Firecrawl synchronous client")

    # Reads FIRECRAWL_API_KEY and FIRECRAWL_API_URL from the environment or .env
    with FirecrawlClient(timeout=60.0, max_retries=3) as client:
        try:
            scrape_page(client, "https://firecrawl.dev")
            crawl_site(client, "https://docs.firecrawl.dev")
            batch_scrape_in_background(
                client, ["https://firecrawl.dev/pricing", "https://firecrawl.dev/blog"]
            )
        except FirecrawlError as e:
            logger.exception(f"Error during SDK example: {e}")


if __name__ == "__main__":
    main()
