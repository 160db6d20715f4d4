"""Reddit adapter (pro plan): newest posts from a list of subreddits."""

from collections.abc import AsyncIterator
from datetime import datetime, timezone
from typing import Any

from seer.ingestion.adapters.base import (
    AdapterSpec,
    clean_text,
    config_list,
    iter_sub_requests,
    truncate,
)
from seer.ingestion.http_client import HTTPClient
from seer.ingestion.schemas import RawItem
from seer.sources.schemas import Source, SourceType

LISTING_URL = "https://www.reddit.com/r/{subreddit}/new.json"
DEFAULT_SUBREDDITS = ("SideProject", "startups", "Entrepreneur", "SaaS", "indiehackers")


async def fetch_raw(source: Source, client: HTTPClient) -> AsyncIterator[dict[str, Any]]:
    async def listing(subreddit: str) -> list[dict[str, Any]]:
        payload = await client.get_json(
            LISTING_URL.format(subreddit=subreddit),
            params={"limit": 50},
        )
        children = (payload.get("data") or {}).get("children") or []
        # malformed children are passed through and counted by transform
        return [child.get("data") if isinstance(child, dict) else child for child in children]

    subreddits = config_list(source, "subreddits", DEFAULT_SUBREDDITS)
    async for post in iter_sub_requests(SourceType.REDDIT, subreddits, listing):
        yield post


def transform(source: Source, post: dict[str, Any]) -> RawItem | None:
    if post.get("stickied"):
        return None

    title = clean_text(post.get("title") or "")
    if not title:
        return None

    created = post.get("created_utc") or post.get("created")
    published = (
        datetime.fromtimestamp(float(created), tz=timezone.utc)
        if created
        else datetime.now(timezone.utc)
    )

    return RawItem(
        source_id=source.id,
        source_type=SourceType.REDDIT,
        external_id=str(post["id"]),
        title=title,
        body=truncate(clean_text(post.get("selftext") or ""), 500),
        url="https://reddit.com" + post.get("permalink", ""),
        published_at=published,
        metadata={
            "subreddit": post.get("subreddit"),
            "score": post.get("score") or 0,
            "num_comments": post.get("num_comments") or 0,
        },
    )


SPEC = AdapterSpec(SourceType.REDDIT, fetch_raw, transform)
