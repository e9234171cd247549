"""
Request body construction for the Firecrawl API.

Option models are dumped with their wire names and merged into the request
body. Batch scrape is the one endpoint whose body does not mirror its option
model, so its mapping lives here where it can be tested on its own.
"""

from typing import Any, Dict, List, Optional, Tuple

from .models import BatchScrapeOptions, OptionsModel

IDEMPOTENCY_HEADER = "x-idempotency-key"


def merge_options(body: Dict[str, Any], options: Optional[OptionsModel]) -> Dict[str, Any]:
    """
    Merge an options model into a request body.

    Args:
        body: Request body holding the required fields
        options: Options to merge, or None

    Returns:
        The updated body
    """
    if options is not None:
        body.update(options.to_payload())
    return body


def build_batch_scrape_request(
    urls: List[str], options: Optional[BatchScrapeOptions] = None
) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """
    Build the body and extra headers for a batch scrape request.

    The nested scrape options are flattened to the top level of the body.
    Batch-level fields, including ``urls``, win over scrape options with the
    same name. The idempotency key travels as the ``x-idempotency-key``
    header and never appears in the body.

    Args:
        urls: URLs to scrape
        options: Batch scrape options

    Returns:
        Tuple of (body, headers)
    """
    headers: Dict[str, str] = {}
    if options is None:
        return {"urls": list(urls)}, headers

    if options.idempotency_key:
        headers[IDEMPOTENCY_HEADER] = options.idempotency_key

    batch_fields = options.model_dump(
        by_alias=True, exclude_none=True, exclude={"idempotency_key", "options"}
    )
    scrape_fields = options.options.to_payload() if options.options is not None else {}

    body: Dict[str, Any] = dict(scrape_fields)
    body.update(batch_fields)
    body["urls"] = list(urls)
    return body, headers
