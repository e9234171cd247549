"""
Tests for the Firecrawl SDK models.
"""

import pytest
from pydantic import ValidationError

from firecrawl_sdk.models import (AgentOptions, AgentStatusResponse,
                                  BatchScrapeJob, BatchScrapeOptions,
                                  BatchScrapeResponse, BrowserListResponse,
                                  BrowserSession, ConcurrencyCheck, CrawlJob,
                                  CrawlOptions, CreditUsage, Document,
                                  JsonFormat, MapData, ScrapeOptions,
                                  SearchData, WebhookConfig)

# Sample data for testing
SAMPLE_CRAWL_STATUS = {
    "status": "completed",
    "completed": 2,
    "total": 2,
    "creditsUsed": 2,
    "expiresAt": "2026-01-01T00:00:00Z",
    "next": None,
    "data": [
        {
            "markdown": "# Example",
            "rawHtml": "<h1>Example</h1>",
            "metadata": {"title": "Example", "statusCode": 200},
        },
        {
            "markdown": "# About",
            "json": {"company": "Example Inc"},
            "changeTracking": {"changeStatus": "new"},
        },
    ],
}


def test_crawl_job_from_response():
    """Test parsing a crawl status response."""
    job = CrawlJob.model_validate(SAMPLE_CRAWL_STATUS)

    assert job.is_done
    assert job.completed == 2
    assert job.credits_used == 2
    assert job.expires_at == "2026-01-01T00:00:00Z"
    assert job.next is None
    assert len(job.data) == 2
    assert job.data[0].raw_html == "<h1>Example</h1>"
    assert job.data[0].metadata["title"] == "Example"
    assert job.data[1].json_data == {"company": "Example Inc"}
    assert job.data[1].change_tracking == {"changeStatus": "new"}
    assert "completed=2/2" in str(job)


@pytest.mark.parametrize(
    "status,done",
    [
        ("completed", True),
        ("failed", True),
        ("cancelled", True),
        ("scraping", False),
        ("processing", False),
        (None, False),
    ],
)
def test_is_done(status, done):
    assert BatchScrapeJob(status=status).is_done is done
    assert AgentStatusResponse(status=status).is_done is done


def test_unknown_fields_are_ignored():
    doc = Document.model_validate({"markdown": "# Hi", "somethingNew": 1})

    assert doc.markdown == "# Hi"


def test_map_links_from_strings():
    data = MapData.model_validate({"links": ["https://a.com", "https://b.com"]})

    assert [link.url for link in data.links] == ["https://a.com", "https://b.com"]
    assert data.links[0].title is None


def test_map_links_mixed():
    data = MapData.model_validate(
        {"links": ["https://a.com", {"url": "https://b.com", "title": "B", "description": "Page B"}]}
    )

    assert data.links[0].url == "https://a.com"
    assert data.links[1].title == "B"
    assert data.links[1].description == "Page B"


def test_map_links_missing():
    assert MapData.model_validate({"links": None}).links == []
    assert MapData.model_validate({}).links == []


def test_search_groups_default_to_empty():
    data = SearchData.model_validate({"web": [{"url": "https://a.com"}], "news": None})

    assert data.web == [{"url": "https://a.com"}]
    assert data.news == []
    assert data.images == []


def test_browser_list_without_sessions():
    assert BrowserListResponse.model_validate({"success": True, "sessions": None}).sessions == []


def test_batch_response_invalid_urls():
    response = BatchScrapeResponse.model_validate(
        {"id": "b1", "url": "https://api.test.dev/v2/batch/scrape/b1", "invalidURLs": ["nope"]}
    )

    assert response.invalid_urls == ["nope"]


def test_crawl_options_wire_names():
    options = CrawlOptions(
        limit=5,
        deduplicate_similar_urls=True,
        regex_on_full_url=False,
        crawl_entire_domain=True,
        webhook="https://hooks.test.dev",
        scrape_options=ScrapeOptions(formats=["markdown"], max_age=1000),
    )

    assert options.to_payload() == {
        "limit": 5,
        "deduplicateSimilarURLs": True,
        "regexOnFullURL": False,
        "crawlEntireDomain": True,
        "webhook": "https://hooks.test.dev",
        "scrapeOptions": {"formats": ["markdown"], "maxAge": 1000},
    }


def test_json_format_payload():
    options = ScrapeOptions(
        formats=["markdown", JsonFormat(prompt="Extract the title", json_schema={"type": "object"})]
    )

    assert options.to_payload()["formats"] == [
        "markdown",
        {"type": "json", "prompt": "Extract the title", "schema": {"type": "object"}},
    ]


def test_options_are_immutable():
    options = ScrapeOptions(only_main_content=True)

    with pytest.raises(ValidationError):
        options.only_main_content = False


def test_agent_options_payload():
    options = AgentOptions(
        prompt="Find the pricing page",
        urls=["https://example.com"],
        json_schema={"type": "object"},
        strict_constrain_to_urls=True,
        max_credits=100,
        webhook=WebhookConfig(url="https://hooks.test.dev"),
    )

    assert options.to_payload() == {
        "prompt": "Find the pricing page",
        "urls": ["https://example.com"],
        "schema": {"type": "object"},
        "strictConstrainToURLs": True,
        "maxCredits": 100,
        "webhook": {"url": "https://hooks.test.dev"},
    }


def test_agent_options_require_prompt():
    with pytest.raises(ValidationError):
        AgentOptions()
    with pytest.raises(ValidationError, match="Agent prompt is required"):
        AgentOptions(prompt="   ")


def test_webhook_requires_url():
    with pytest.raises(ValidationError, match="Webhook URL is required"):
        WebhookConfig(url="")


@pytest.mark.parametrize(
    "model,payload,field,default",
    [
        (CrawlJob, {"status": "scraping", "completed": None, "total": None}, "completed", 0),
        (CrawlJob, {"status": "scraping", "completed": None, "total": None}, "total", 0),
        (ConcurrencyCheck, {"concurrency": 1, "maxConcurrency": None}, "max_concurrency", 0),
        (CreditUsage, {"remainingCredits": None}, "remaining_credits", 0),
        (BrowserSession, {"id": "br-1", "streamWebView": None}, "stream_web_view", False),
        (AgentStatusResponse, {"success": None, "status": "processing"}, "success", False),
        (BrowserListResponse, {"success": True, "sessions": None}, "sessions", []),
    ],
)
def test_null_fields_take_defaults(model, payload, field, default):
    """A JSON null parses like a missing field."""
    assert getattr(model.model_validate(payload), field) == default


@pytest.mark.parametrize("options_model", [CrawlOptions, BatchScrapeOptions])
@pytest.mark.parametrize("webhook", ["", "   "])
def test_blank_string_webhook_is_rejected(options_model, webhook):
    with pytest.raises(ValidationError, match="Webhook URL is required"):
        options_model(webhook=webhook)


def test_string_webhook_is_accepted():
    assert BatchScrapeOptions(webhook="https://hooks.test.dev").webhook == "https://hooks.test.dev"
