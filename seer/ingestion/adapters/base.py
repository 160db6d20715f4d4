"""
Adapter contract and the shared run loop.

An adapter is a pair of plain functions registered for one SourceType:

    fetch_raw(source, client) -> async iterator of raw entries (dicts)
    transform(source, entry)  -> RawItem, or None to filter the entry

``collect()`` drives the pair. A failing ``transform`` only drops that entry;
a failing ``fetch_raw`` fails the whole source with UpstreamFetchError.
Per-entry checks (age windows, required fields) belong in ``transform``.
"""

import hashlib
import html
import logging
import re
import time
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from bs4 import BeautifulSoup

from seer.errors import UpstreamFetchError
from seer.ingestion.http_client import HTTPClient, HTTPClientError
from seer.ingestion.schemas import RawItem
from seer.sources.schemas import Source, SourceType

logger = logging.getLogger(__name__)

FetchRaw = Callable[[Source, HTTPClient], AsyncIterator[dict[str, Any]]]
Transform = Callable[[Source, dict[str, Any]], RawItem | None]


@dataclass(frozen=True)
class AdapterSpec:
    """Handler pair for one source kind."""

    source_type: SourceType
    fetch_raw: FetchRaw
    transform: Transform


@dataclass
class AdapterStats:
    """Statistics for one adapter run."""

    items_fetched: int = 0
    items_filtered: int = 0
    errors: int = 0
    start_time: float = field(default_factory=time.monotonic)

    @property
    def elapsed_seconds(self) -> float:
        return time.monotonic() - self.start_time


@dataclass
class AdapterResult:
    items: list[RawItem]
    stats: AdapterStats


async def collect(spec: AdapterSpec, source: Source, client: HTTPClient) -> AdapterResult:
    """
    Run an adapter for one source and gather its items.

    Entries repeated within one run (same external id) are yielded once.

    Raises:
        UpstreamFetchError: retrieval failed as a whole
    """
    stats = AdapterStats()
    items: list[RawItem] = []
    seen: set[str] = set()

    try:
        async for entry in spec.fetch_raw(source, client):
            try:
                item = spec.transform(source, entry)
            except Exception as e:
                stats.errors += 1
                logger.warning(
                    f"Skipping malformed {spec.source_type.value} entry "
                    f"for source {source.id}: {e}"
                )
                continue

            if item is None or item.external_id in seen:
                stats.items_filtered += 1
                continue

            seen.add(item.external_id)
            items.append(item)
            stats.items_fetched += 1

    except UpstreamFetchError:
        raise
    except HTTPClientError as e:
        raise UpstreamFetchError(
            f"{spec.source_type.value} fetch failed: {e}",
            source_type=spec.source_type.value,
        ) from e
    except Exception as e:
        raise UpstreamFetchError(
            f"{spec.source_type.value} fetch failed: {type(e).__name__}: {e}",
            source_type=spec.source_type.value,
        ) from e

    logger.info(
        f"{spec.source_type.value} source {source.id} completed: "
        f"fetched={stats.items_fetched}, filtered={stats.items_filtered}, "
        f"errors={stats.errors}, elapsed={stats.elapsed_seconds:.2f}s"
    )
    return AdapterResult(items=items, stats=stats)


async def iter_sub_requests(
    source_type: SourceType,
    keys: Iterable[str],
    fetch_one: Callable[[str], Awaitable[Iterable[dict[str, Any]]]],
) -> AsyncIterator[dict[str, Any]]:
    """
    Run one sub-request per key (query, tag, subreddit) and yield its entries.

    Failed sub-requests, including ones whose payload has an unexpected
    shape, are skipped. If every sub-request fails the source fails as a
    whole.
    """
    keys = list(keys)
    failures = 0
    last_error: Exception | None = None

    for key in keys:
        try:
            entries = list(await fetch_one(key))
        except HTTPClientError as e:
            failures += 1
            last_error = e
            logger.warning(f"{source_type.value} sub-request '{key}' failed: {e}")
            continue
        except Exception as e:
            failures += 1
            last_error = e
            logger.warning(
                f"{source_type.value} sub-request '{key}' returned an unusable payload: "
                f"{type(e).__name__}: {e}"
            )
            continue

        for entry in entries:
            yield entry

    if keys and failures == len(keys):
        raise UpstreamFetchError(
            f"All {failures} {source_type.value} requests failed: {last_error}",
            source_type=source_type.value,
        )


def config_list(source: Source, key: str, default: Iterable[str]) -> list[str]:
    """Read a list option from source.config (list or comma-separated string)."""
    value = source.config.get(key)
    if not value:
        return list(default)
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return [str(v) for v in value]


def clean_text(text: str) -> str:
    """Collapse whitespace and strip control characters."""
    text = " ".join(text.split())
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)
    return text.strip()


def strip_html(content: str) -> str:
    """Extract readable text from an HTML fragment."""
    if not content:
        return ""

    soup = BeautifulSoup(content, "html.parser")
    for element in soup(["script", "style", "nav", "footer", "header"]):
        element.decompose()

    text = html.unescape(soup.get_text(separator=" "))
    return clean_text(text)


def truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rstrip() + "..."


def stable_hash(value: str) -> str:
    """
    Deterministic 16-hex-char id for entries without a native identifier.

    Unlike hash(), stable across processes and interpreter versions.
    """
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:16]


def parse_iso(value: str | None) -> datetime:
    """Parse an ISO-8601 timestamp, defaulting to now (UTC) when missing."""
    if not value:
        return datetime.now(timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
