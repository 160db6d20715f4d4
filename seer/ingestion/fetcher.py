"""
Fan-out/fan-in fetch over all enabled sources.

Each enabled source runs in its own task, bounded by a semaphore and an
overall per-source timeout. Every task yields a SourceFetchResult; the
batch never fails as a whole.
"""

import asyncio
import time
from dataclasses import dataclass, field

import structlog

from seer.errors import SeerError, UpstreamFetchError
from seer.ingestion.adapters import collect, get_adapter
from seer.ingestion.http_client import HTTPClient, RetryConfig
from seer.observability.metrics import get_metrics
from seer.scoring.deduplicator import Deduplicator
from seer.sources.schemas import Source
from seer.sources.service import SourceRegistry

logger = structlog.get_logger(__name__)


@dataclass
class FetcherConfig:
    concurrency: int = 4
    source_timeout_seconds: float = 120.0
    http_timeout_seconds: float = 30.0
    max_retries: int = 3
    max_backoff_seconds: float = 60.0
    user_agent: str | None = None


@dataclass
class SourceFetchResult:
    """Outcome of fetching one source."""

    source_id: int | None
    source_type: str
    source_name: str
    success: bool
    items: int = 0
    created: int = 0
    duplicates: int = 0
    filtered: int = 0
    entry_errors: int = 0
    error: str | None = None
    elapsed_seconds: float = 0.0


@dataclass
class FetchSummary:
    results: list[SourceFetchResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def created(self) -> int:
        return sum(r.created for r in self.results)

    @property
    def status(self) -> str:
        if not self.results:
            return "idle"
        if self.failed == 0:
            return "completed"
        if self.succeeded == 0:
            return "failed"
        return "partial"

    @property
    def message(self) -> str:
        if not self.results:
            return "No enabled sources to fetch"
        text = (
            f"Fetched {len(self.results)} sources: {self.succeeded} succeeded, "
            f"{self.failed} failed, {self.created} new opportunities"
        )
        failures = [f"{r.source_name}: {r.error}" for r in self.results if not r.success]
        if failures:
            text += " (" + "; ".join(failures) + ")"
        return text

    def to_dict(self) -> dict:
        return {"status": self.status, "message": self.message}


class Fetcher:
    """Runs every enabled source through its adapter and the deduplicator."""

    def __init__(
        self,
        registry: SourceRegistry,
        deduplicator: Deduplicator,
        config: FetcherConfig | None = None,
    ) -> None:
        self._registry = registry
        self._dedup = deduplicator
        self._config = config or FetcherConfig()

    async def fetch_all(self) -> FetchSummary:
        """Fetch all enabled sources once.

        The enabled set is read once at the start; sources toggled while the
        cycle runs take effect on the next cycle.
        """
        sources = await self._registry.list_enabled()
        if not sources:
            logger.info("No enabled sources")
            return FetchSummary()

        semaphore = asyncio.Semaphore(self._config.concurrency)
        retry = RetryConfig(
            max_retries=self._config.max_retries,
            max_backoff_seconds=self._config.max_backoff_seconds,
        )

        async with HTTPClient(
            retry,
            timeout=self._config.http_timeout_seconds,
            user_agent=self._config.user_agent,
        ) as client:

            async def bounded(source: Source) -> SourceFetchResult:
                async with semaphore:
                    return await self.fetch_source(source, client)

            results = await asyncio.gather(*(bounded(s) for s in sources))

        summary = FetchSummary(results=list(results))
        get_metrics().record_cycle(summary.status, time.time())
        logger.info(
            "Fetch cycle finished",
            status=summary.status,
            succeeded=summary.succeeded,
            failed=summary.failed,
            created=summary.created,
        )
        return summary

    async def fetch_source(self, source: Source, client: HTTPClient) -> SourceFetchResult:
        """Fetch one source; failures are captured in the result."""
        metrics = get_metrics()
        source_type = source.type.value
        log = logger.bind(source_id=source.id, source_type=source_type)
        start = time.perf_counter()

        try:
            async with asyncio.timeout(self._config.source_timeout_seconds):
                adapter = get_adapter(source.type)
                fetched = await collect(adapter, source, client)
                dedup = await self._dedup.process_batch(fetched.items)
        except TimeoutError:
            error = f"timed out after {self._config.source_timeout_seconds:.0f}s"
            return self._failure(source, error, "timeout", start, log)
        except UpstreamFetchError as e:
            return self._failure(source, e.message, "upstream", start, log)
        except SeerError as e:
            return self._failure(source, e.message, e.code, start, log)
        except Exception as e:
            log.error("Source fetch crashed", error=str(e), exc_info=True)
            return self._failure(source, f"{type(e).__name__}: {e}", "internal", start, log)

        elapsed = time.perf_counter() - start
        if fetched.stats.errors:
            metrics.record_error(source_type, "malformed_entry")
        metrics.record_fetch(
            source_type,
            items=len(fetched.items),
            created=dedup.created,
            duplicates=dedup.duplicates,
            filtered=dedup.filtered,
            latency=elapsed,
        )
        log.info(
            "Source fetched",
            items=len(fetched.items),
            created=dedup.created,
            duplicates=dedup.duplicates,
            entry_errors=fetched.stats.errors,
        )
        return SourceFetchResult(
            source_id=source.id,
            source_type=source_type,
            source_name=source.name,
            success=True,
            items=len(fetched.items),
            created=dedup.created,
            duplicates=dedup.duplicates,
            filtered=dedup.filtered,
            entry_errors=fetched.stats.errors,
            elapsed_seconds=round(elapsed, 3),
        )

    def _failure(self, source: Source, error: str, error_type: str, start: float, log) -> SourceFetchResult:
        get_metrics().record_error(source.type.value, error_type)
        log.warning("Source fetch failed", error=error, error_type=error_type)
        return SourceFetchResult(
            source_id=source.id,
            source_type=source.type.value,
            source_name=source.name,
            success=False,
            error=error,
            elapsed_seconds=round(time.perf_counter() - start, 3),
        )
