"""Schema bootstrap for all tables, in foreign-key order."""

import logging

from seer.opportunities.repository import OpportunityRepository
from seer.reports.repository import ReportRepository
from seer.sources.repository import SourcesRepository
from seer.storage.database import Database

logger = logging.getLogger(__name__)


async def create_all_tables(database: Database) -> None:
    """Create sources, opportunities and reports (idempotent)."""
    await SourcesRepository(database).create_table()
    await OpportunityRepository(database).create_table()
    await ReportRepository(database).create_table()
    logger.info("Database schema ready")
