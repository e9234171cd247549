"""
Tests for request body construction.
"""

import json

from firecrawl_sdk.models import (BatchScrapeOptions, CrawlOptions,
                                  ScrapeOptions, WebhookConfig)
from firecrawl_sdk.payloads import (IDEMPOTENCY_HEADER,
                                    build_batch_scrape_request, merge_options)


def test_merge_options_without_options():
    assert merge_options({"url": "https://example.com"}, None) == {"url": "https://example.com"}


def test_merge_options_uses_wire_names():
    body = merge_options(
        {"url": "https://example.com"},
        ScrapeOptions(formats=["markdown"], only_main_content=True, wait_for=500),
    )

    assert body == {
        "url": "https://example.com",
        "formats": ["markdown"],
        "onlyMainContent": True,
        "waitFor": 500,
    }


def test_merge_options_nested_models():
    body = merge_options(
        {"url": "https://example.com"},
        CrawlOptions(limit=10, scrape_options=ScrapeOptions(only_main_content=True)),
    )

    assert body["limit"] == 10
    assert body["scrapeOptions"] == {"onlyMainContent": True}


def test_batch_request_without_options():
    body, headers = build_batch_scrape_request(["https://a.com", "https://b.com"])

    assert body == {"urls": ["https://a.com", "https://b.com"]}
    assert headers == {}


def test_batch_idempotency_key_is_a_header_only():
    options = BatchScrapeOptions(idempotency_key="key-123", max_concurrency=2)

    body, headers = build_batch_scrape_request(["https://a.com"], options)

    assert headers == {IDEMPOTENCY_HEADER: "key-123"}
    assert "idempotencyKey" not in body
    assert "key-123" not in json.dumps(body)
    assert body == {"urls": ["https://a.com"], "maxConcurrency": 2}


def test_batch_empty_idempotency_key_sends_no_header():
    _, headers = build_batch_scrape_request(["https://a.com"], BatchScrapeOptions(idempotency_key=""))

    assert headers == {}


def test_batch_scrape_options_are_flattened():
    options = BatchScrapeOptions(
        options=ScrapeOptions(formats=["markdown", "html"], only_main_content=True),
        ignore_invalid_urls=True,
    )

    body, _ = build_batch_scrape_request(["https://a.com"], options)

    assert "options" not in body
    assert body["formats"] == ["markdown", "html"]
    assert body["onlyMainContent"] is True
    assert body["ignoreInvalidURLs"] is True
    assert body["urls"] == ["https://a.com"]


def test_batch_fields_win_over_scrape_fields():
    options = BatchScrapeOptions(
        options=ScrapeOptions(integration="from-scrape", formats=["markdown"]),
        integration="from-batch",
    )

    body, _ = build_batch_scrape_request(["https://a.com"], options)

    assert body["integration"] == "from-batch"
    assert body["formats"] == ["markdown"]


def test_batch_webhook_object():
    options = BatchScrapeOptions(
        webhook=WebhookConfig(url="https://hooks.test.dev", events=["completed"]),
        append_to_id="job-0",
        zero_data_retention=True,
    )

    body, _ = build_batch_scrape_request(["https://a.com"], options)

    assert body["webhook"] == {"url": "https://hooks.test.dev", "events": ["completed"]}
    assert body["appendToId"] == "job-0"
    assert body["zeroDataRetention"] is True
