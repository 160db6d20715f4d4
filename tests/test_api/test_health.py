"""Tests for the health endpoint."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from seer.api import dependencies
from seer.ingestion.fetcher import FetchSummary


def _mock_db(healthy: bool = True):
    db = AsyncMock()
    if healthy:
        db.health_check = AsyncMock(return_value=True)
    else:
        db.health_check = AsyncMock(side_effect=Exception("Connection refused"))
    return db


@pytest.fixture
def patch_components(monkeypatch):
    """Point the health checks at mock components."""

    def _patch(db_healthy: bool = True, last_summary=None):
        scheduler = MagicMock(is_running=True, is_fetching=False, last_summary=last_summary)
        monkeypatch.setattr(dependencies, "get_database", AsyncMock(return_value=_mock_db(db_healthy)))
        monkeypatch.setattr(dependencies, "get_scheduler", AsyncMock(return_value=scheduler))

    return _patch


class TestHealth:
    @pytest.mark.parametrize("path", ["/health", "/api/health"])
    def test_healthy(self, client, patch_components, path):
        patch_components()

        response = client.get(path)

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"]
        assert data["components"]["database"]["status"] == "healthy"
        assert data["components"]["scheduler"]["details"]["running"] is True

    def test_database_down_still_ok(self, client, patch_components):
        patch_components(db_healthy=False)

        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["components"]["database"]["status"] == "unhealthy"
        assert "Connection refused" in data["components"]["database"]["details"]["error"]

    def test_reports_last_cycle(self, client, patch_components):
        patch_components(last_summary=FetchSummary())

        data = client.get("/health").json()

        assert data["components"]["scheduler"]["details"]["last_status"] == "idle"
