"""
Report generation service.

A report is built from one repeatable-read snapshot of the opportunities
detected in ``[start, end)``: the rendered content and ``opportunity_count``
come from the same rows. The optional summarizer runs after the snapshot is
released and before the insert, so no transaction is held open across a
network call.
"""

from datetime import date, datetime, time, timedelta, timezone

import structlog

from seer.errors import NotFoundError, ValidationError
from seer.observability.metrics import get_metrics
from seer.opportunities.repository import OpportunityRepository
from seer.reports.renderer import render_human, render_prompt
from seer.reports.repository import ReportRepository
from seer.reports.schemas import Report, SummaryResult
from seer.reports.summarizer import Summarizer
from seer.storage.database import Database

logger = structlog.get_logger(__name__)

MAX_LIST_LIMIT = 200

WindowBound = str | date | datetime | None


def parse_bound(value: WindowBound, field: str) -> datetime | None:
    """Normalize a window bound to an aware UTC datetime.

    ``YYYY-MM-DD`` strings and ``date`` objects mean midnight UTC; naive
    datetimes are taken as UTC.
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        raw = value.strip()
        try:
            if len(raw) == 10:
                value = date.fromisoformat(raw)
            else:
                value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            raise ValidationError(
                f"{field} must be YYYY-MM-DD or an ISO-8601 datetime, got {raw!r}",
                field=field,
            ) from None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    return datetime.combine(value, time.min, tzinfo=timezone.utc)


class ReportService:
    """Generates, stores and reads reports."""

    def __init__(
        self,
        database: Database,
        summarizer: Summarizer | None = None,
        default_days: int = 7,
    ) -> None:
        self._db = database
        self._summarizer = summarizer
        self._default_days = default_days
        self._reports = ReportRepository(database)
        self._opportunities = OpportunityRepository(database)

    @property
    def repository(self) -> ReportRepository:
        return self._reports

    @property
    def summarizer(self) -> Summarizer | None:
        return self._summarizer

    def resolve_window(
        self,
        start: WindowBound = None,
        end: WindowBound = None,
    ) -> tuple[datetime, datetime]:
        """Apply defaults (``end=now``, ``start=end-default_days``) and validate."""
        end_dt = parse_bound(end, "end") or datetime.now(timezone.utc)
        start_dt = parse_bound(start, "start") or end_dt - timedelta(days=self._default_days)

        if start_dt > end_dt:
            raise ValidationError(
                "start must not be after end",
                start=start_dt.isoformat(),
                end=end_dt.isoformat(),
            )
        return start_dt, end_dt

    async def generate(
        self,
        start: WindowBound = None,
        end: WindowBound = None,
    ) -> Report:
        period_start, period_end = self.resolve_window(start, end)
        log = logger.bind(
            period_start=period_start.isoformat(),
            period_end=period_end.isoformat(),
        )

        async with self._db.transaction(isolation="repeatable_read", readonly=True) as conn:
            opportunities = await self._opportunities.list_detected_between(
                period_start, period_end, conn=conn
            )

        content_human = render_human(opportunities, period_start, period_end)
        content_prompt = render_prompt(opportunities, period_start, period_end)

        result = await self._summarize(content_prompt)
        if not result.available and result.reason:
            log.warning("report_summary_unavailable", reason=result.reason)

        report = Report(
            period_start=period_start,
            period_end=period_end,
            opportunity_count=len(opportunities),
            content_human=content_human,
            content_prompt=content_prompt,
            summary=result.summary,
            ai_analysis=result.analysis,
            generated_at=datetime.now(timezone.utc),
        )

        async with self._db.transaction() as conn:
            stored = await self._reports.insert(report, conn=conn)

        get_metrics().record_report(self._outcome(result))
        log.info(
            "report_generated",
            report_id=stored.id,
            opportunity_count=stored.opportunity_count,
            summarized=result.available,
        )
        return stored

    async def _summarize(self, prompt: str) -> SummaryResult:
        if self._summarizer is None or not self._summarizer.enabled:
            return SummaryResult.unavailable("")
        return await self._summarizer.summarize(prompt)

    def _outcome(self, result: SummaryResult) -> str:
        if result.available:
            return "ok"
        if self._summarizer is None or not self._summarizer.enabled:
            return "disabled"
        return "unavailable"

    async def get(self, report_id: int) -> Report:
        report = await self._reports.get_by_id(report_id)
        if report is None:
            raise NotFoundError("Report", report_id)
        return report

    async def get_content(self, report_id: int) -> str:
        """Raw LLM prompt stored with the report."""
        exists, content = await self._reports.get_prompt(report_id)
        if not exists:
            raise NotFoundError("Report", report_id)
        return content or ""

    async def list_reports(self, limit: int = 50, offset: int = 0) -> list[Report]:
        if not 1 <= limit <= MAX_LIST_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_LIST_LIMIT}")
        if offset < 0:
            raise ValidationError("offset must not be negative")
        return await self._reports.list_recent(limit, offset)
