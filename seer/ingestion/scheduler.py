"""
Periodic and on-demand fetch cycles.

Only one cycle runs at a time: the scheduled loop waits for a running manual
cycle, while a manual trigger during a running cycle raises
FetchInProgressError.
"""

import asyncio

import structlog

from seer.errors import FetchInProgressError
from seer.ingestion.fetcher import Fetcher, FetchSummary

logger = structlog.get_logger(__name__)


class FetchScheduler:
    def __init__(self, fetcher: Fetcher, interval_seconds: float) -> None:
        self._fetcher = fetcher
        self._interval = interval_seconds
        self._lock = asyncio.Lock()
        self._running = False
        self._task: asyncio.Task | None = None
        self._background_tasks: set[asyncio.Task] = set()
        self._last_summary: FetchSummary | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_fetching(self) -> bool:
        """True while a cycle runs or a background cycle is queued to start."""
        return self._lock.locked() or bool(self._background_tasks)

    @property
    def last_summary(self) -> FetchSummary | None:
        return self._last_summary

    async def run_once(self) -> FetchSummary:
        """Run one cycle now, failing fast if one is already in flight."""
        if self.is_fetching:
            raise FetchInProgressError("A fetch cycle is already running")
        return await self._run_locked()

    def trigger(self) -> None:
        """Start a cycle in the background and return immediately."""
        if self.is_fetching:
            raise FetchInProgressError("A fetch cycle is already running")

        task = asyncio.create_task(self._run_locked(), name="seer_manual_fetch")
        self._background_tasks.add(task)
        task.add_done_callback(self._background_done)

    def _background_done(self, task: asyncio.Task) -> None:
        self._background_tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background fetch failed", error=str(task.exception()))

    async def _run_locked(self) -> FetchSummary:
        async with self._lock:
            summary = await self._fetcher.fetch_all()
            self._last_summary = summary
            return summary

    async def start(self) -> None:
        """Start the periodic loop as a background task."""
        if self._task is not None:
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name="seer_fetch_scheduler")
        logger.info("Fetch scheduler started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Stop the loop and cancel in-flight cycles."""
        self._running = False
        tasks = [t for t in [self._task, *self._background_tasks] if t is not None]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._task = None
        logger.info("Fetch scheduler stopped")

    async def _loop(self) -> None:
        while self._running:
            try:
                await self._run_locked()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Scheduled fetch failed", error=str(e), exc_info=True)

            await asyncio.sleep(self._interval)
