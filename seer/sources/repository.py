"""Database repository for the sources table."""

import json
import logging
from typing import Any

from seer.sources.schemas import Source, SourceType
from seer.storage.database import Database

logger = logging.getLogger(__name__)

_CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS sources (
    id          BIGSERIAL PRIMARY KEY,
    type        TEXT NOT NULL,
    name        TEXT NOT NULL,
    url         TEXT,
    config      JSONB NOT NULL DEFAULT '{}',
    enabled     BOOLEAN NOT NULL DEFAULT TRUE,
    is_builtin  BOOLEAN NOT NULL DEFAULT FALSE,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_sources_type
    ON sources(type);
CREATE INDEX IF NOT EXISTS idx_sources_enabled
    ON sources(enabled) WHERE enabled = TRUE;
"""

_INSERT_SQL = """
INSERT INTO sources (type, name, url, config, enabled, is_builtin)
VALUES ($1, $2, $3, $4, $5, $6)
RETURNING *
"""

_UPDATE_SQL = """
UPDATE sources
SET name = $2, url = $3, config = $4, enabled = $5
WHERE id = $1 AND is_builtin = FALSE
RETURNING *
"""

# Serializes quota checks for one source type across concurrent creates
_TYPE_LOCK_SQL = "SELECT pg_advisory_xact_lock(hashtext('seer.sources.' || $1))"


def _load_json(value: Any) -> dict:
    if not value:
        return {}
    if isinstance(value, str):
        return json.loads(value)
    return dict(value)


def _record_to_source(record) -> Source:
    """Convert an asyncpg Record to a Source dataclass."""
    return Source(
        id=record["id"],
        type=SourceType(record["type"]),
        name=record["name"],
        url=record["url"],
        config=_load_json(record["config"]),
        enabled=record["enabled"],
        is_builtin=record["is_builtin"],
        created_at=record["created_at"],
    )


class SourcesRepository:
    """CRUD operations for the sources table.

    Methods that take ``conn`` run on that connection (inside the caller's
    transaction) and fall back to the pool otherwise.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the sources table and indexes (idempotent)."""
        await self._db.execute(_CREATE_TABLE_SQL)
        logger.info("Sources table ensured")

    async def insert(self, source: Source, conn=None) -> Source:
        """Insert a source and return it with id and created_at filled in."""
        executor = conn or self._db
        row = await executor.fetchrow(
            _INSERT_SQL,
            source.type.value,
            source.name,
            source.url,
            json.dumps(source.config),
            source.enabled,
            source.is_builtin,
        )
        return _record_to_source(row)

    async def lock_type(self, source_type: SourceType, conn) -> None:
        """Take a transaction-scoped lock for quota checks on one type."""
        await conn.execute(_TYPE_LOCK_SQL, source_type.value)

    async def count_by_type(self, source_type: SourceType, conn=None) -> int:
        executor = conn or self._db
        count = await executor.fetchval(
            "SELECT COUNT(*) FROM sources WHERE type = $1",
            source_type.value,
        )
        return count or 0

    async def count_builtin(self) -> int:
        count = await self._db.fetchval(
            "SELECT COUNT(*) FROM sources WHERE is_builtin = TRUE"
        )
        return count or 0

    async def get_by_id(self, source_id: int) -> Source | None:
        row = await self._db.fetchrow(
            "SELECT * FROM sources WHERE id = $1",
            source_id,
        )
        return _record_to_source(row) if row else None

    async def list_all(self) -> list[Source]:
        """All sources, built-ins first, then by name."""
        rows = await self._db.fetch(
            "SELECT * FROM sources ORDER BY is_builtin DESC, name, id"
        )
        return [_record_to_source(r) for r in rows]

    async def list_enabled(self) -> list[Source]:
        """Single read of the enabled set used by each fetch cycle."""
        rows = await self._db.fetch(
            "SELECT * FROM sources WHERE enabled = TRUE ORDER BY id"
        )
        return [_record_to_source(r) for r in rows]

    async def toggle(self, source_id: int) -> Source | None:
        """Flip ``enabled`` atomically. Returns None if the id is unknown."""
        row = await self._db.fetchrow(
            "UPDATE sources SET enabled = NOT enabled WHERE id = $1 RETURNING *",
            source_id,
        )
        return _record_to_source(row) if row else None

    async def update(
        self,
        source_id: int,
        name: str,
        url: str | None,
        config: dict,
        enabled: bool,
    ) -> Source | None:
        """Overwrite the editable fields of a user source.

        Built-in rows are never matched. Returns None if nothing was updated.
        """
        row = await self._db.fetchrow(
            _UPDATE_SQL,
            source_id,
            name,
            url,
            json.dumps(config),
            enabled,
        )
        return _record_to_source(row) if row else None

    async def delete_user_source(self, source_id: int) -> bool:
        """Delete a non-builtin source. Returns True if a row was removed."""
        result = await self._db.execute(
            "DELETE FROM sources WHERE id = $1 AND is_builtin = FALSE",
            source_id,
        )
        return result.endswith(" 1")
