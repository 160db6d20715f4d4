"""Tests for the opportunity endpoints."""

from seer.errors import NotFoundError
from tests.test_api.conftest import make_opportunity


class TestListOpportunities:
    def test_passes_filters(self, client, mock_store):
        mock_store.query.return_value = [make_opportunity(2), make_opportunity(1)]

        response = client.get(
            "/api/opportunities",
            params={"source": "rss", "min_score": 40, "limit": 10, "offset": 20},
        )

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [2, 1]
        mock_store.query.assert_awaited_once_with(
            source="rss", min_score=40.0, limit=10, offset=20
        )

    def test_defaults(self, client, mock_store):
        client.get("/api/opportunities")

        mock_store.query.assert_awaited_once_with(
            source=None, min_score=None, limit=50, offset=0
        )

    def test_min_score_out_of_range(self, client, mock_store):
        response = client.get("/api/opportunities", params={"min_score": 150})

        assert response.status_code == 422
        assert response.json()["error_type"] == "validation_error"
        mock_store.query.assert_not_awaited()

    def test_limit_too_large(self, client):
        response = client.get("/api/opportunities", params={"limit": 5000})
        assert response.status_code == 422


class TestOpportunityDetail:
    def test_get(self, client):
        data = client.get("/api/opportunities/1").json()

        assert data["title"] == "Looking for an alternative to Jira"
        assert data["signals"] == ["solution_seeking"]
        assert data["score"] == 42.9

    def test_missing(self, client, mock_store):
        mock_store.get.side_effect = NotFoundError("Opportunity", 7)

        response = client.get("/api/opportunities/7")

        assert response.status_code == 404
        assert response.json()["detail"] == "Opportunity 7 not found"

    def test_non_integer_id(self, client):
        response = client.get("/api/opportunities/abc")
        assert response.status_code == 422


class TestStats:
    def test_stats(self, client, mock_store):
        response = client.get("/api/opportunities/stats", params={"source": "hackernews"})

        assert response.status_code == 200
        assert response.json() == {
            "total": 3,
            "by_source": {"hackernews": 2, "rss": 1},
            "average_score": 41.5,
            "today": 1,
        }
        mock_store.stats.assert_awaited_once_with(source="hackernews", min_score=None)
