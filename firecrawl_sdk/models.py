"""
Models for the Firecrawl SDK.

This module defines the Pydantic models used for requests and responses in the SDK.
Attributes are snake_case; the wire format is the API's camelCase, handled
through aliases.
"""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import (BaseModel, ConfigDict, Field, field_validator,
                      model_validator)
from pydantic.alias_generators import to_camel

# Job statuses after which the server never changes a job again
TERMINAL_STATUSES = frozenset({"completed", "failed", "cancelled"})


class FirecrawlModel(BaseModel):
    """Base model mapping snake_case attributes to camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        # A JSON null means "not set": the field keeps its default
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to a JSON-ready dict using wire names, without unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class OptionsModel(FirecrawlModel):
    """Base for request options; immutable once built."""

    model_config = ConfigDict(frozen=True)


# ----------------------------------------------------------------------
# Request options
# ----------------------------------------------------------------------


class LocationConfig(OptionsModel):
    """Geolocation used by the remote browser."""

    country: Optional[str] = Field(None, description="ISO 3166-1 alpha-2 country code")
    languages: Optional[List[str]] = Field(None, description="Preferred languages")


class JsonFormat(OptionsModel):
    """Structured JSON extraction format for the ``formats`` list."""

    type: Literal["json"] = "json"
    prompt: Optional[str] = Field(None, description="Extraction prompt")
    json_schema: Optional[Dict[str, Any]] = Field(
        None, alias="schema", description="JSON schema for the extracted data"
    )


def _check_webhook_url(url: str) -> str:
    if not url or not url.strip():
        raise ValueError("Webhook URL is required")
    return url


class WebhookConfig(OptionsModel):
    """Webhook notified by the server as an async job progresses."""

    url: str = Field(..., description="Webhook endpoint")
    headers: Optional[Dict[str, str]] = Field(None, description="Headers sent with each call")
    metadata: Optional[Dict[str, str]] = Field(None, description="Metadata echoed back in payloads")
    events: Optional[List[str]] = Field(None, description="Events to subscribe to")

    @field_validator("url")
    @classmethod
    def url_not_empty(cls, v: str) -> str:
        return _check_webhook_url(v)


class ScrapeOptions(OptionsModel):
    """Options controlling how a single page is scraped."""

    formats: Optional[List[Union[str, JsonFormat, Dict[str, Any]]]] = Field(
        None, description="Output formats, e.g. 'markdown', 'html' or a JsonFormat"
    )
    headers: Optional[Dict[str, str]] = None
    include_tags: Optional[List[str]] = None
    exclude_tags: Optional[List[str]] = None
    only_main_content: Optional[bool] = None
    timeout: Optional[int] = Field(None, description="Timeout in milliseconds")
    wait_for: Optional[int] = Field(None, description="Delay before capture in milliseconds")
    mobile: Optional[bool] = None
    parsers: Optional[List[Any]] = None
    actions: Optional[List[Dict[str, Any]]] = None
    location: Optional[LocationConfig] = None
    skip_tls_verification: Optional[bool] = None
    remove_base64_images: Optional[bool] = None
    block_ads: Optional[bool] = None
    proxy: Optional[str] = None
    max_age: Optional[int] = Field(None, description="Maximum cache age in milliseconds")
    store_in_cache: Optional[bool] = None
    integration: Optional[str] = None


class CrawlOptions(OptionsModel):
    """Options for a crawl job."""

    prompt: Optional[str] = None
    exclude_paths: Optional[List[str]] = None
    include_paths: Optional[List[str]] = None
    max_discovery_depth: Optional[int] = None
    sitemap: Optional[str] = None
    ignore_query_parameters: Optional[bool] = None
    deduplicate_similar_urls: Optional[bool] = Field(None, alias="deduplicateSimilarURLs")
    limit: Optional[int] = None
    crawl_entire_domain: Optional[bool] = None
    allow_external_links: Optional[bool] = None
    allow_subdomains: Optional[bool] = None
    delay: Optional[int] = None
    max_concurrency: Optional[int] = None
    webhook: Optional[Union[str, WebhookConfig]] = None
    scrape_options: Optional[ScrapeOptions] = None
    regex_on_full_url: Optional[bool] = Field(None, alias="regexOnFullURL")
    zero_data_retention: Optional[bool] = None
    integration: Optional[str] = None

    @field_validator("webhook")
    @classmethod
    def webhook_url_not_empty(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _check_webhook_url(v)
        return v


class BatchScrapeOptions(OptionsModel):
    """
    Options for a batch scrape job.

    ``options`` holds per-page scrape settings; they are sent flattened at the
    top level of the request. ``idempotency_key`` is sent as a header.
    """

    options: Optional[ScrapeOptions] = None
    webhook: Optional[Union[str, WebhookConfig]] = None
    append_to_id: Optional[str] = None
    ignore_invalid_urls: Optional[bool] = Field(None, alias="ignoreInvalidURLs")
    max_concurrency: Optional[int] = None
    zero_data_retention: Optional[bool] = None
    idempotency_key: Optional[str] = None
    integration: Optional[str] = None

    @field_validator("webhook")
    @classmethod
    def webhook_url_not_empty(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _check_webhook_url(v)
        return v


class MapOptions(OptionsModel):
    """Options for URL discovery on a site."""

    search: Optional[str] = None
    sitemap: Optional[str] = None
    include_subdomains: Optional[bool] = None
    ignore_query_parameters: Optional[bool] = None
    limit: Optional[int] = None
    timeout: Optional[int] = None
    integration: Optional[str] = None
    location: Optional[LocationConfig] = None


class SearchOptions(OptionsModel):
    """Options for a web search."""

    sources: Optional[List[Any]] = None
    categories: Optional[List[Any]] = None
    limit: Optional[int] = None
    tbs: Optional[str] = None
    location: Optional[str] = None
    ignore_invalid_urls: Optional[bool] = Field(None, alias="ignoreInvalidURLs")
    timeout: Optional[int] = None
    scrape_options: Optional[ScrapeOptions] = None
    integration: Optional[str] = None


class AgentOptions(OptionsModel):
    """Options for an agent task. ``prompt`` is required."""

    urls: Optional[List[str]] = None
    prompt: str = Field(..., description="What the agent should do")
    json_schema: Optional[Dict[str, Any]] = Field(None, alias="schema")
    integration: Optional[str] = None
    max_credits: Optional[int] = None
    strict_constrain_to_urls: Optional[bool] = Field(None, alias="strictConstrainToURLs")
    model: Optional[str] = None
    webhook: Optional[WebhookConfig] = None

    @field_validator("prompt")
    @classmethod
    def prompt_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Agent prompt is required")
        return v


# ----------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------


class Document(FirecrawlModel):
    """A scraped page in the formats that were requested."""

    markdown: Optional[str] = None
    html: Optional[str] = None
    raw_html: Optional[str] = None
    json_data: Optional[Any] = Field(None, alias="json")
    summary: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    links: Optional[List[str]] = None
    images: Optional[List[str]] = None
    screenshot: Optional[str] = None
    attributes: Optional[List[Dict[str, Any]]] = None
    actions: Optional[Dict[str, Any]] = None
    warning: Optional[str] = None
    change_tracking: Optional[Dict[str, Any]] = None
    branding: Optional[Dict[str, Any]] = None


class CrawlResponse(FirecrawlModel):
    """Reference to a crawl job that was just started."""

    id: Optional[str] = None
    url: Optional[str] = None


class BatchScrapeResponse(FirecrawlModel):
    """Reference to a batch scrape job that was just started."""

    id: Optional[str] = None
    url: Optional[str] = None
    invalid_urls: Optional[List[str]] = Field(None, alias="invalidURLs")


class PaginatedJob(FirecrawlModel):
    """
    Status and results of a crawl or batch scrape job.

    A status response carries one page of ``data``; ``next`` is the absolute
    URL of the following page, or empty on the last page.
    """

    id: Optional[str] = None
    status: Optional[str] = None
    completed: int = 0
    total: int = 0
    credits_used: Optional[int] = None
    expires_at: Optional[str] = None
    next: Optional[str] = None
    data: Optional[List[Document]] = None

    @property
    def is_done(self) -> bool:
        """Whether the job reached a terminal status."""
        return self.status in TERMINAL_STATUSES

    def __str__(self) -> str:
        return f"{type(self).__name__}(id={self.id}, status={self.status}, completed={self.completed}/{self.total})"


class CrawlJob(PaginatedJob):
    """Status and results of a crawl job."""


class BatchScrapeJob(PaginatedJob):
    """Status and results of a batch scrape job."""


class MapLink(FirecrawlModel):
    """A URL discovered by map."""

    url: str
    title: Optional[str] = None
    description: Optional[str] = None


class MapData(FirecrawlModel):
    """URLs discovered on a site."""

    links: List[MapLink] = Field(default_factory=list)

    @field_validator("links", mode="before")
    @classmethod
    def normalize_links(cls, v: Any) -> Any:
        # The API returns either plain URL strings or link objects
        if v is None:
            return []
        return [{"url": link} if isinstance(link, str) else link for link in v]


class SearchData(FirecrawlModel):
    """Search results grouped by source."""

    web: List[Dict[str, Any]] = Field(default_factory=list)
    news: List[Dict[str, Any]] = Field(default_factory=list)
    images: List[Dict[str, Any]] = Field(default_factory=list)

    @field_validator("web", "news", "images", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class AgentResponse(FirecrawlModel):
    """Reference to an agent task that was just started."""

    success: bool = False
    id: Optional[str] = None
    error: Optional[str] = None


class AgentStatusResponse(FirecrawlModel):
    """Status and result of an agent task."""

    success: bool = False
    status: Optional[str] = None
    error: Optional[str] = None
    data: Optional[Any] = None
    model: Optional[str] = None
    expires_at: Optional[str] = None
    credits_used: Optional[int] = None

    @property
    def is_done(self) -> bool:
        """Whether the task reached a terminal status."""
        return self.status in TERMINAL_STATUSES


class BrowserCreateResponse(FirecrawlModel):
    success: bool = False
    id: Optional[str] = None
    cdp_url: Optional[str] = None
    live_view_url: Optional[str] = None
    expires_at: Optional[str] = None
    error: Optional[str] = None


class BrowserExecuteResponse(FirecrawlModel):
    success: bool = False
    stdout: Optional[str] = None
    result: Optional[str] = None
    stderr: Optional[str] = None
    exit_code: Optional[int] = None
    killed: Optional[bool] = None
    error: Optional[str] = None


class BrowserDeleteResponse(FirecrawlModel):
    success: bool = False
    session_duration_ms: Optional[int] = None
    credits_billed: Optional[int] = None
    error: Optional[str] = None


class BrowserSession(FirecrawlModel):
    id: Optional[str] = None
    status: Optional[str] = None
    cdp_url: Optional[str] = None
    live_view_url: Optional[str] = None
    stream_web_view: bool = False
    created_at: Optional[str] = None
    last_activity: Optional[str] = None


class BrowserListResponse(FirecrawlModel):
    success: bool = False
    sessions: List[BrowserSession] = Field(default_factory=list)
    error: Optional[str] = None

    @field_validator("sessions", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class ConcurrencyCheck(FirecrawlModel):
    """Current and maximum concurrent requests for the team."""

    concurrency: int = 0
    max_concurrency: int = 0


class CreditUsage(FirecrawlModel):
    """Credit balance for the current billing period."""

    remaining_credits: int = 0
    plan_credits: Optional[int] = None
    billing_period_start: Optional[str] = None
    billing_period_end: Optional[str] = None
