"""
Generic RSS/Atom adapter.

Fetches the source URL through the shared HTTP client and parses it with
feedparser. Entry HTML is reduced to plain text with BeautifulSoup.
"""

import calendar
import logging
from collections.abc import AsyncIterator
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import feedparser

from seer.errors import UpstreamFetchError
from seer.ingestion.adapters.base import (
    AdapterSpec,
    clean_text,
    stable_hash,
    strip_html,
    truncate,
)
from seer.ingestion.http_client import HTTPClient
from seer.ingestion.schemas import RawItem
from seer.sources.schemas import Source, SourceType

logger = logging.getLogger(__name__)

MAX_ENTRIES = 50
DESCRIPTION_LIMIT = 500
FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml;q=0.9, */*;q=0.8"


async def fetch_raw(source: Source, client: HTTPClient) -> AsyncIterator[dict[str, Any]]:
    if not source.url:
        raise UpstreamFetchError(
            f"RSS source {source.id} has no feed URL",
            source_type=SourceType.RSS.value,
        )

    response = await client.get(
        source.url,
        headers={"Accept": FEED_ACCEPT},
    )
    feed = feedparser.parse(response.content)

    entries = feed.get("entries", [])
    if feed.get("bozo") and not entries:
        raise UpstreamFetchError(
            f"Malformed feed at {source.url}: {feed.get('bozo_exception')}",
            source_type=SourceType.RSS.value,
        )

    logger.debug(f"Parsed {len(entries)} entries from {source.url}")
    for entry in entries[:MAX_ENTRIES]:
        yield entry


def transform(source: Source, entry: dict[str, Any]) -> RawItem | None:
    title = clean_text(entry.get("title", ""))
    if not title:
        return None

    description = strip_html(entry.get("summary", ""))
    if not description and entry.get("content"):
        description = truncate(strip_html(entry["content"][0].get("value", "")), DESCRIPTION_LIMIT)

    return RawItem(
        source_id=source.id,
        source_type=SourceType.RSS,
        external_id=entry_id(entry),
        title=title,
        body=description,
        url=entry.get("link", ""),
        published_at=parse_timestamp(entry),
        metadata={
            "feed_url": source.url,
            "author": entry.get("author"),
            "tags": [t.get("term", "") for t in entry.get("tags", [])],
        },
    )


def entry_id(entry: dict[str, Any]) -> str:
    """GUID, else link, else a stable hash of title and publish date."""
    for key in ("id", "guid", "link"):
        value = entry.get(key)
        if value:
            return str(value)
    return stable_hash(f"{entry.get('title', '')}{entry.get('published', '')}")


def parse_timestamp(entry: dict[str, Any]) -> datetime:
    for key in ("published", "updated"):
        parsed = entry.get(f"{key}_parsed")
        if parsed:
            return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)
        raw = entry.get(key)
        if raw:
            try:
                return parsedate_to_datetime(raw)
            except (TypeError, ValueError):
                continue

    return datetime.now(timezone.utc)


SPEC = AdapterSpec(SourceType.RSS, fetch_raw, transform)
