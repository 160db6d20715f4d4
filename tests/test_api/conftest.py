"""Shared fixtures for API tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from seer.api.app import create_app
from seer.api.dependencies import (
    get_opportunity_store,
    get_report_service,
    get_scheduler,
    get_source_registry,
)
from seer.opportunities.schemas import Opportunity, OpportunityStats
from seer.reports.schemas import Report
from seer.sources.schemas import Source, SourceType

CREATED_AT = datetime(2024, 1, 3, 12, 0, 0, tzinfo=timezone.utc)


def make_source(source_id: int = 1, type: SourceType = SourceType.RSS, **kwargs) -> Source:
    """Helper to create a Source with sensible defaults."""
    return Source(
        id=source_id,
        type=type,
        name=kwargs.pop("name", "Example feed"),
        url=kwargs.pop("url", "https://example.com/feed.xml"),
        created_at=kwargs.pop("created_at", CREATED_AT),
        **kwargs,
    )


def make_opportunity(opportunity_id: int = 1, **kwargs) -> Opportunity:
    return Opportunity(
        id=opportunity_id,
        title=kwargs.pop("title", "Looking for an alternative to Jira"),
        source_type=kwargs.pop("source_type", "rss"),
        source_id_external=kwargs.pop("source_id_external", f"ext-{opportunity_id}"),
        score=kwargs.pop("score", 42.9),
        signals=kwargs.pop("signals", ["solution_seeking"]),
        detected_at=kwargs.pop("detected_at", CREATED_AT),
        **kwargs,
    )


def make_report(report_id: int = 1, **kwargs) -> Report:
    return Report(
        id=report_id,
        period_start=kwargs.pop("period_start", datetime(2024, 1, 1, tzinfo=timezone.utc)),
        period_end=kwargs.pop("period_end", datetime(2024, 1, 8, tzinfo=timezone.utc)),
        opportunity_count=kwargs.pop("opportunity_count", 1),
        content_human=kwargs.pop("content_human", "# Seer Opportunity Report"),
        content_prompt=kwargs.pop("content_prompt", "=== OPPORTUNITIES ==="),
        generated_at=kwargs.pop("generated_at", CREATED_AT),
        created_at=kwargs.pop("created_at", CREATED_AT),
        **kwargs,
    )


@pytest.fixture
def mock_registry():
    """Mock SourceRegistry."""
    registry = MagicMock()
    registry.list_sources = AsyncMock(return_value=[])
    registry.get = AsyncMock(return_value=make_source())
    registry.create = AsyncMock(return_value=make_source(5))
    registry.toggle = AsyncMock(return_value=make_source(enabled=False))
    registry.update = AsyncMock(return_value=make_source(name="Renamed feed"))
    registry.delete = AsyncMock(return_value=None)
    registry.types = MagicMock(
        return_value={
            "types": ["hackernews", "github", "npm", "devto", "rss"],
            "is_pro": False,
            "max_rss": 2,
        }
    )
    return registry


@pytest.fixture
def mock_store():
    """Mock OpportunityStore."""
    store = MagicMock()
    store.query = AsyncMock(return_value=[])
    store.get = AsyncMock(return_value=make_opportunity())
    store.stats = AsyncMock(
        return_value=OpportunityStats(
            total=3, by_source={"hackernews": 2, "rss": 1}, average_score=41.5, today=1
        )
    )
    return store


@pytest.fixture
def mock_reports():
    """Mock ReportService."""
    service = MagicMock()
    service.list_reports = AsyncMock(return_value=[])
    service.generate = AsyncMock(return_value=make_report())
    service.get = AsyncMock(return_value=make_report())
    service.get_content = AsyncMock(return_value="=== OPPORTUNITIES ===")
    return service


@pytest.fixture
def mock_scheduler():
    """Mock FetchScheduler."""
    scheduler = MagicMock()
    scheduler.run_once = AsyncMock()
    scheduler.trigger = MagicMock()
    return scheduler


@pytest.fixture
def client(mock_registry, mock_store, mock_reports, mock_scheduler):
    """TestClient with all services overridden by mocks."""
    app = create_app()
    app.dependency_overrides[get_source_registry] = lambda: mock_registry
    app.dependency_overrides[get_opportunity_store] = lambda: mock_store
    app.dependency_overrides[get_report_service] = lambda: mock_reports
    app.dependency_overrides[get_scheduler] = lambda: mock_scheduler
    return TestClient(app, raise_server_exceptions=False)
