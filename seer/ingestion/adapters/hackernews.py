"""Hacker News adapter (Algolia search API)."""

import time
from collections.abc import AsyncIterator
from typing import Any

from seer.ingestion.adapters.base import (
    AdapterSpec,
    clean_text,
    config_list,
    iter_sub_requests,
    parse_iso,
    strip_html,
)
from seer.ingestion.http_client import HTTPClient
from seer.ingestion.schemas import RawItem
from seer.sources.schemas import Source, SourceType

SEARCH_URL = "https://hn.algolia.com/api/v1/search_by_date"
ITEM_URL = "https://news.ycombinator.com/item?id="

# Phrases people use when describing an unmet need or a new product
DEFAULT_QUERIES = (
    "I wish",
    "I need",
    "looking for",
    "frustrated with",
    "problem with",
    "alternative to",
    "replacement for",
    "would pay for",
    "what do you use for",
    "is there a",
    "someone should build",
    "Show HN",
    "Ask HN",
)


async def fetch_raw(source: Source, client: HTTPClient) -> AsyncIterator[dict[str, Any]]:
    lookback_hours = int(source.config.get("lookback_hours", 24))
    since = int(time.time()) - lookback_hours * 3600

    async def search(query: str) -> list[dict[str, Any]]:
        payload = await client.get_json(
            SEARCH_URL,
            params={
                "query": query,
                "tags": "story",
                "hitsPerPage": 20,
                "numericFilters": f"created_at_i>{since}",
            },
        )
        return payload.get("hits", [])

    queries = config_list(source, "queries", DEFAULT_QUERIES)
    async for hit in iter_sub_requests(SourceType.HACKERNEWS, queries, search):
        yield hit


def transform(source: Source, hit: dict[str, Any]) -> RawItem | None:
    object_id = str(hit["objectID"])
    title = clean_text(hit.get("title") or "")
    if not title:
        return None

    # Link posts have no text; fall back to the submitted URL
    body = strip_html(hit.get("story_text") or "") or (hit.get("url") or "")

    return RawItem(
        source_id=source.id,
        source_type=SourceType.HACKERNEWS,
        external_id=object_id,
        title=title,
        body=body,
        url=ITEM_URL + object_id,
        published_at=parse_iso(hit.get("created_at")),
        metadata={
            "author": hit.get("author"),
            "points": hit.get("points") or 0,
            "num_comments": hit.get("num_comments") or 0,
            "link": hit.get("url"),
        },
    )


SPEC = AdapterSpec(SourceType.HACKERNEWS, fetch_raw, transform)
