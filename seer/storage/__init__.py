"""Storage layer: asyncpg connection pool and schema bootstrap."""

from seer.storage.database import Database

__all__ = ["Database"]
