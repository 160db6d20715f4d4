"""Database repository for the opportunities table."""

import json
import logging
from datetime import datetime
from typing import Any

from seer.opportunities.schemas import Opportunity, OpportunityStats
from seer.storage.database import Database

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS opportunities (
    id                  BIGSERIAL PRIMARY KEY,
    source_id           BIGINT REFERENCES sources(id) ON DELETE SET NULL,
    title               TEXT NOT NULL,
    description         TEXT NOT NULL DEFAULT '',
    source_type         TEXT NOT NULL,
    source_url          TEXT NOT NULL DEFAULT '',
    source_id_external  TEXT NOT NULL,
    score               DOUBLE PRECISION NOT NULL DEFAULT 0
                        CHECK (score >= 0 AND score <= 100),
    signals             TEXT[] NOT NULL DEFAULT '{}',
    metadata            JSONB NOT NULL DEFAULT '{}',
    published_at        TIMESTAMPTZ,
    detected_at         TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (source_type, source_id_external)
);

CREATE INDEX IF NOT EXISTS idx_opportunities_detected_at
    ON opportunities(detected_at DESC, id DESC);
CREATE INDEX IF NOT EXISTS idx_opportunities_source_type
    ON opportunities(source_type);
CREATE INDEX IF NOT EXISTS idx_opportunities_score
    ON opportunities(score DESC);
"""

# The unique constraint is the only serialization point between
# concurrent fetchers; a losing insert returns no row.
_INSERT_IF_ABSENT_SQL = """
INSERT INTO opportunities (
    source_id, title, description, source_type, source_url,
    source_id_external, score, signals, metadata, published_at
)
VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10)
ON CONFLICT (source_type, source_id_external) DO NOTHING
RETURNING *
"""


def _load_json(value: Any) -> dict:
    if not value:
        return {}
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


def _record_to_opportunity(record) -> Opportunity:
    """Convert an asyncpg Record to an Opportunity dataclass."""
    return Opportunity(
        id=record["id"],
        source_id=record["source_id"],
        title=record["title"],
        description=record["description"],
        source_type=record["source_type"],
        source_url=record["source_url"],
        source_id_external=record["source_id_external"],
        score=float(record["score"]),
        signals=list(record["signals"] or []),
        metadata=_load_json(record["metadata"]),
        published_at=record["published_at"],
        detected_at=record["detected_at"],
        created_at=record["created_at"],
    )


def _filters(
    source: str | None,
    min_score: float | None,
) -> tuple[str, list[Any]]:
    conditions: list[str] = []
    params: list[Any] = []

    if source:
        params.append(source)
        conditions.append(f"source_type = ${len(params)}")

    if min_score is not None:
        params.append(min_score)
        conditions.append(f"score >= ${len(params)}")

    where_clause = " WHERE " + " AND ".join(conditions) if conditions else ""
    return where_clause, params


class OpportunityRepository:
    """Reads and first-sighting inserts for the opportunities table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the opportunities table and indexes (idempotent)."""
        await self._db.execute(_CREATE_TABLE_SQL)
        logger.info("Opportunities table ensured")

    async def insert_if_absent(self, opportunity: Opportunity) -> Opportunity | None:
        """Insert on first sighting. Returns None if the external item is known."""
        row = await self._db.fetchrow(
            _INSERT_IF_ABSENT_SQL,
            opportunity.source_id,
            opportunity.title,
            opportunity.description,
            opportunity.source_type,
            opportunity.source_url,
            opportunity.source_id_external,
            opportunity.score,
            list(opportunity.signals),
            json.dumps(opportunity.metadata, default=str),
            opportunity.published_at,
        )
        return _record_to_opportunity(row) if row else None

    async def get_by_id(self, opportunity_id: int) -> Opportunity | None:
        row = await self._db.fetchrow(
            "SELECT * FROM opportunities WHERE id = $1",
            opportunity_id,
        )
        return _record_to_opportunity(row) if row else None

    async def query(
        self,
        source: str | None = None,
        min_score: float | None = None,
        limit: int | None = 50,
        offset: int = 0,
    ) -> list[Opportunity]:
        """Newest first. ``limit=None`` returns every matching row."""
        where_clause, params = _filters(source, min_score)

        sql = f"SELECT * FROM opportunities{where_clause} ORDER BY detected_at DESC, id DESC"
        if limit is not None:
            params.extend([limit, offset])
            sql += f" LIMIT ${len(params) - 1} OFFSET ${len(params)}"
        elif offset:
            params.append(offset)
            sql += f" OFFSET ${len(params)}"

        rows = await self._db.fetch(sql, *params)
        return [_record_to_opportunity(r) for r in rows]

    async def stats(
        self,
        source: str | None = None,
        min_score: float | None = None,
    ) -> OpportunityStats:
        """Aggregates computed inside one repeatable-read snapshot."""
        where_clause, params = _filters(source, min_score)

        async with self._db.transaction(isolation="repeatable_read", readonly=True) as conn:
            totals = await conn.fetchrow(
                f"""
                SELECT
                    COUNT(*) AS total,
                    COALESCE(AVG(score), 0) AS average_score,
                    COUNT(*) FILTER (
                        WHERE detected_at >= NOW() - INTERVAL '24 hours'
                    ) AS today
                FROM opportunities{where_clause}
                """,
                *params,
            )
            by_source_rows = await conn.fetch(
                f"""
                SELECT source_type, COUNT(*) AS count
                FROM opportunities{where_clause}
                GROUP BY source_type
                ORDER BY source_type
                """,
                *params,
            )

        return OpportunityStats(
            total=totals["total"],
            by_source={r["source_type"]: r["count"] for r in by_source_rows},
            average_score=round(float(totals["average_score"]), 2),
            today=totals["today"],
        )

    async def list_detected_between(
        self,
        start: datetime,
        end: datetime,
        conn=None,
    ) -> list[Opportunity]:
        """Opportunities with detected_at in [start, end), highest score first."""
        executor = conn or self._db
        rows = await executor.fetch(
            """
            SELECT * FROM opportunities
            WHERE detected_at >= $1 AND detected_at < $2
            ORDER BY score DESC, detected_at DESC, id DESC
            """,
            start,
            end,
        )
        return [_record_to_opportunity(r) for r in rows]
