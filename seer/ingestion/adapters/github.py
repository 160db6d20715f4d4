"""GitHub adapter (repository search API)."""

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

SEARCH_URL = "https://api.github.com/search/repositories"


def default_queries(now: datetime) -> list[str]:
    week_ago = (now - timedelta(days=7)).strftime("%Y-%m-%d")
    return [
        f"stars:>10 created:>{week_ago}",
        "help wanted good first issue",
        "looking for contributors",
    ]


async def fetch_raw(source: Source, client: HTTPClient) -> AsyncIterator[dict[str, Any]]:
    headers = {"Accept": "application/vnd.github+json"}
    token = source.config.get("token")
    if token:
        headers["Authorization"] = f"Bearer {token}"

    async def search(query: str) -> list[dict[str, Any]]:
        payload = await client.get_json(
            SEARCH_URL,
            params={"q": query, "sort": "stars", "order": "desc", "per_page": 20},
            headers=headers,
        )
        return payload.get("items", [])

    queries = config_list(source, "queries", default_queries(datetime.now(timezone.utc)))
    async for repo in iter_sub_requests(SourceType.GITHUB, queries, search):
        yield repo


def transform(source: Source, repo: dict[str, Any]) -> RawItem | None:
    full_name = repo["full_name"]
    description = clean_text(repo.get("description") or "") or f"Repository: {full_name}"
    topics = repo.get("topics") or []

    return RawItem(
        source_id=source.id,
        source_type=SourceType.GITHUB,
        external_id=str(repo["id"]),
        title=full_name,
        body=f"{description} {' '.join(topics)}".strip(),
        url=repo.get("html_url") or f"https://github.com/{full_name}",
        published_at=parse_iso(repo.get("pushed_at") or repo.get("created_at")),
        metadata={
            "stars": repo.get("stargazers_count") or 0,
            "forks": repo.get("forks_count") or 0,
            "open_issues": repo.get("open_issues_count") or 0,
            "language": repo.get("language"),
            "topics": topics,
        },
    )


SPEC = AdapterSpec(SourceType.GITHUB, fetch_raw, transform)
