"""DEV.to adapter: rising articles per tag."""

from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone
from typing import Any

from seer.ingestion.adapters.base import (
    AdapterSpec,
    clean_text,
    config_list,
    iter_sub_requests,
    parse_iso,
)
from seer.ingestion.http_client import HTTPClient
from seer.ingestion.schemas import RawItem
from seer.sources.schemas import Source, SourceType

ARTICLES_URL = "https://dev.to/api/articles"
MAX_AGE_DAYS = 7

DEFAULT_TAGS = (
    "showdev",
    "opensource",
    "sideproject",
    "startup",
    "indiehackers",
    "buildinpublic",
    "productivity",
    "devtools",
    "selfhosted",
    "discuss",
)


async def fetch_raw(source: Source, client: HTTPClient) -> AsyncIterator[dict[str, Any]]:
    async def by_tag(tag: str) -> list[dict[str, Any]]:
        return await client.get_json(
            ARTICLES_URL,
            params={"tag": tag, "per_page": 20, "state": "rising"},
        )

    tags = config_list(source, "tags", DEFAULT_TAGS)
    async for article in iter_sub_requests(SourceType.DEVTO, tags, by_tag):
        yield article


def transform(source: Source, article: dict[str, Any]) -> RawItem | None:
    title = clean_text(article.get("title") or "")
    if not title:
        return None
    published_at = parse_iso(article.get("published_at"))
    if published_at < datetime.now(timezone.utc) - timedelta(days=MAX_AGE_DAYS):
        return None

    tags = article.get("tag_list") or []
    if isinstance(tags, str):
        tags = [t.strip() for t in tags.split(",") if t.strip()]

    return RawItem(
        source_id=source.id,
        source_type=SourceType.DEVTO,
        external_id=str(article["id"]),
        title=title,
        body=clean_text(article.get("description") or ""),
        url=article.get("url") or "",
        published_at=published_at,
        metadata={
            "reactions": article.get("public_reactions_count") or 0,
            "num_comments": article.get("comments_count") or 0,
            "tags": tags,
            "author": (article.get("user") or {}).get("username"),
        },
    )


SPEC = AdapterSpec(SourceType.DEVTO, fetch_raw, transform)
