"""Database repository for the reports table."""

import logging

from seer.reports.schemas import Report
from seer.storage.database import Database

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS reports (
    id                 BIGSERIAL PRIMARY KEY,
    period_start       TIMESTAMPTZ NOT NULL,
    period_end         TIMESTAMPTZ NOT NULL,
    opportunity_count  INTEGER NOT NULL DEFAULT 0,
    content_human      TEXT,
    content_prompt     TEXT,
    summary            TEXT,
    ai_analysis        TEXT,
    generated_at       TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    created_at         TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    CHECK (period_start <= period_end)
);

CREATE INDEX IF NOT EXISTS idx_reports_generated_at
    ON reports(generated_at DESC);
"""

_INSERT_SQL = """
INSERT INTO reports (
    period_start, period_end, opportunity_count,
    content_human, content_prompt, summary, ai_analysis, generated_at
)
VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
RETURNING *
"""


def _record_to_report(record) -> Report:
    """Convert an asyncpg Record to a Report dataclass."""
    return Report(
        id=record["id"],
        period_start=record["period_start"],
        period_end=record["period_end"],
        opportunity_count=record["opportunity_count"],
        content_human=record["content_human"],
        content_prompt=record["content_prompt"],
        summary=record["summary"],
        ai_analysis=record["ai_analysis"],
        generated_at=record["generated_at"],
        created_at=record["created_at"],
    )


class ReportRepository:
    """Insert-only storage for generated reports."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the reports table and indexes (idempotent)."""
        await self._db.execute(_CREATE_TABLE_SQL)
        logger.info("Reports table ensured")

    async def insert(self, report: Report, conn=None) -> Report:
        executor = conn or self._db
        row = await executor.fetchrow(
            _INSERT_SQL,
            report.period_start,
            report.period_end,
            report.opportunity_count,
            report.content_human,
            report.content_prompt,
            report.summary,
            report.ai_analysis,
            report.generated_at,
        )
        return _record_to_report(row)

    async def get_by_id(self, report_id: int) -> Report | None:
        row = await self._db.fetchrow("SELECT * FROM reports WHERE id = $1", report_id)
        return _record_to_report(row) if row else None

    async def get_prompt(self, report_id: int) -> tuple[bool, str | None]:
        """Returns (exists, content_prompt) without loading the other fields."""
        row = await self._db.fetchrow(
            "SELECT content_prompt FROM reports WHERE id = $1",
            report_id,
        )
        if row is None:
            return False, None
        return True, row["content_prompt"]

    async def list_recent(self, limit: int = 50, offset: int = 0) -> list[Report]:
        rows = await self._db.fetch(
            """
            SELECT * FROM reports
            ORDER BY generated_at DESC, id DESC
            LIMIT $1 OFFSET $2
            """,
            limit,
            offset,
        )
        return [_record_to_report(r) for r in rows]
