"""npm registry adapter: recently published packages matching developer-tool queries."""

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

SEARCH_URL = "https://registry.npmjs.org/-/v1/search"
PACKAGE_URL = "https://www.npmjs.com/package/"
MAX_AGE_DAYS = 14

DEFAULT_QUERIES = (
    "cli",
    "devtool",
    "self-hosted",
    "alternative",
    "boilerplate",
    "starter",
    "sdk",
    "api client",
    "vite plugin",
    "auth",
    "llm",
    "markdown",
)


async def fetch_raw(source: Source, client: HTTPClient) -> AsyncIterator[dict[str, Any]]:
    async def search(query: str) -> list[dict[str, Any]]:
        payload = await client.get_json(
            SEARCH_URL,
            params={
                "text": query,
                "size": 25,
                "quality": 0.3,
                "popularity": 0.3,
                "maintenance": 0.4,
            },
        )
        return payload.get("objects", [])

    queries = config_list(source, "queries", DEFAULT_QUERIES)
    async for obj in iter_sub_requests(SourceType.NPM, queries, search):
        yield obj


def transform(source: Source, obj: dict[str, Any]) -> RawItem | None:
    package = obj["package"]
    name = package["name"]
    published_at = parse_iso(package.get("date"))
    max_age = int(source.config.get("max_age_days", MAX_AGE_DAYS))
    if published_at < datetime.now(timezone.utc) - timedelta(days=max_age):
        return None

    version = package.get("version", "")
    description = clean_text(package.get("description") or "") or f"npm package: {name} v{version}"
    keywords = package.get("keywords") or []

    return RawItem(
        source_id=source.id,
        source_type=SourceType.NPM,
        external_id=name,
        title=name,
        body=f"{description} {' '.join(keywords)}".strip(),
        url=(package.get("links") or {}).get("npm") or PACKAGE_URL + name,
        published_at=published_at,
        metadata={
            "version": version,
            "keywords": keywords,
            "search_score": (obj.get("score") or {}).get("final"),
        },
    )


SPEC = AdapterSpec(SourceType.NPM, fetch_raw, transform)
