#!/usr/bin/env python
"""
Example script demonstrating how to use the Firecrawl SDK with asyncio.

This example maps a site, searches the web, runs an agent task and executes
code in a remote browser session, all through the asynchronous client.
"""

import asyncio
import os
import sys

# Add parent directory to path to import the SDK
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from firecrawl_sdk import (AgentOptions, AsyncFirecrawlClient, MapOptions,
                           RateLimitError, SearchOptions)


async def map_example(client: AsyncFirecrawlClient) -> None:
    print("\n=== Mapping a Site ===\n")

    result = await client.map("https://firecrawl.dev", MapOptions(limit=20))
    for link in result.links:
        print(f"{link.url} {link.title or ''}")


async def search_example(client: AsyncFirecrawlClient) -> None:
    print("\n=== Searching the Web ===\n")

    result = await client.search("web scraping for LLMs", SearchOptions(limit=5))
    for item in result.web:
        print(f"- {item.get('title')}: {item.get('url')}")


async def agent_example(client: AsyncFirecrawlClient) -> None:
    """Ask an agent for structured data from a site."""
    print("\n=== Running an Agent ===\n")

    options = AgentOptions(
        prompt="Find the monthly price of every plan",
        urls=["https://firecrawl.dev/pricing"],
        json_schema={
            "type": "object",
            "properties": {"plans": {"type": "array", "items": {"type": "object"}}},
        },
    )
    result = await client.agent(options, poll_interval=5, timeout=600)
    print(f"Status: {result.status}, credits used: {result.credits_used}")
    print(result.data)


async def browser_example(client: AsyncFirecrawlClient) -> None:
    """Run a command in a short-lived browser session."""
    print("\n=== Browser Session ===\n")

    session = await client.browser(ttl=120, activity_ttl=60)
    print(f"Session {session.id}, live view: {session.live_view_url}")
    try:
        result = await client.browser_execute(
            session.id, "print(await page.title())", language="python"
        )
        print(f"Exit code {result.exit_code}: {result.stdout}")
    finally:
        deleted = await client.delete_browser(session.id)
        print(f"Session closed after {deleted.session_duration_ms} ms")


async def main() -> None:
    async with AsyncFirecrawlClient() as client:
        concurrency = await client.get_concurrency()
        print(f"Concurrency: {concurrency.concurrency}/{concurrency.max_concurrency}")

        try:
            await map_example(client)
            await search_example(client)
            await agent_example(client)
            await browser_example(client)
        except RateLimitError as e:
            print(f"Rate limited: {e}")


if __name__ == "__main__":
    asyncio.run(main())
