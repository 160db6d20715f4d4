"""
Dependency injection for FastAPI endpoints.
"""

from seer.config.settings import get_settings
from seer.ingestion.scheduler import FetchScheduler
from seer.opportunities.service import OpportunityStore
from seer.reports.service import ReportService
from seer.services.factory import (
    build_fetcher,
    build_report_service,
    build_scheduler,
    build_source_registry,
)
from seer.sources.service import SourceRegistry
from seer.storage.database import Database

# Global service instances (initialized on first request or at startup)
_database: Database | None = None
_source_registry: SourceRegistry | None = None
_opportunity_store: OpportunityStore | None = None
_report_service: ReportService | None = None
_scheduler: FetchScheduler | None = None


async def get_database() -> Database:
    """Get the shared, connected database."""
    global _database

    if _database is None:
        _database = Database()
        await _database.connect()

    return _database


async def get_source_registry() -> SourceRegistry:
    global _source_registry

    if _source_registry is None:
        db = await get_database()
        _source_registry = build_source_registry(db, get_settings())

    return _source_registry


async def get_opportunity_store() -> OpportunityStore:
    global _opportunity_store

    if _opportunity_store is None:
        db = await get_database()
        _opportunity_store = OpportunityStore(db)

    return _opportunity_store


async def get_report_service() -> ReportService:
    global _report_service

    if _report_service is None:
        db = await get_database()
        _report_service = build_report_service(db, get_settings())

    return _report_service


async def get_scheduler() -> FetchScheduler:
    """
    Get the fetch scheduler.

    Shares the source registry with the sources endpoints so both see the
    same plan.
    """
    global _scheduler

    if _scheduler is None:
        settings = get_settings()
        db = await get_database()
        registry = await get_source_registry()
        fetcher = build_fetcher(db, settings, registry=registry)
        _scheduler = build_scheduler(fetcher, settings)

    return _scheduler


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _database, _source_registry, _opportunity_store, _report_service, _scheduler

    if _scheduler is not None:
        await _scheduler.stop()
        _scheduler = None

    if _report_service is not None and _report_service.summarizer is not None:
        await _report_service.summarizer.close()
    _report_service = None

    _source_registry = None
    _opportunity_store = None

    if _database is not None:
        await _database.close()
        _database = None
