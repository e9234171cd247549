"""
Firecrawl SDK - Python Client Library

A client for the Firecrawl v2 API: scrape pages, crawl and batch-scrape sites,
map URLs, search the web, run agent tasks and drive remote browser sessions.
"""

from .client import AsyncFirecrawlClient
from .config import ClientConfig, load_config
from .exceptions import (AuthenticationError, ConfigError, FirecrawlError,
                         JobTimeoutError, RateLimitError, RequestError,
                         TransportError)
from .models import (AgentOptions, AgentResponse, AgentStatusResponse,
                     BatchScrapeJob, BatchScrapeOptions, BatchScrapeResponse,
                     BrowserCreateResponse, BrowserDeleteResponse,
                     BrowserExecuteResponse, BrowserListResponse,
                     BrowserSession, ConcurrencyCheck, CrawlJob, CrawlOptions,
                     CrawlResponse, CreditUsage, Document, JsonFormat,
                     LocationConfig, MapData, MapLink, MapOptions,
                     ScrapeOptions, SearchData, SearchOptions, WebhookConfig)
from .sync_client import FirecrawlClient

__version__ = "0.1.0"
__all__ = [
    # Clients
    "FirecrawlClient",
    "AsyncFirecrawlClient",

    # Configuration
    "ClientConfig",
    "load_config",

    # Request models
    "ScrapeOptions",
    "CrawlOptions",
    "BatchScrapeOptions",
    "MapOptions",
    "SearchOptions",
    "AgentOptions",
    "WebhookConfig",
    "LocationConfig",
    "JsonFormat",

    # Response models
    "Document",
    "CrawlResponse",
    "CrawlJob",
    "BatchScrapeResponse",
    "BatchScrapeJob",
    "MapData",
    "MapLink",
    "SearchData",
    "AgentResponse",
    "AgentStatusResponse",
    "BrowserCreateResponse",
    "BrowserExecuteResponse",
    "BrowserDeleteResponse",
    "BrowserListResponse",
    "BrowserSession",
    "ConcurrencyCheck",
    "CreditUsage",

    # Errors
    "FirecrawlError",
    "ConfigError",
    "RequestError",
    "AuthenticationError",
    "RateLimitError",
    "TransportError",
    "JobTimeoutError",
]
