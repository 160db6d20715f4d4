"""Tests for SourceRegistry: plan enforcement, quotas and built-ins."""

from unittest.mock import AsyncMock

import pytest

from seer.errors import (
    ForbiddenError,
    InvalidSourceTypeError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from seer.sources.config import PlanConfig, SourcesConfig
from seer.sources.schemas import BUILTIN_SOURCES, SourceType
from seer.sources.service import SourceRegistry
from tests.conftest import make_source_row


@pytest.fixture
def registry(mock_database: AsyncMock) -> SourceRegistry:
    return SourceRegistry(mock_database, PlanConfig(is_pro=False, max_rss=1))


class TestCreate:
    @pytest.mark.asyncio
    async def test_creates_rss_source(
        self, registry: SourceRegistry, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        mock_database.fetchval.return_value = 0
        mock_database.fetchrow.return_value = sample_db_row

        source = await registry.create("rss", "HN", "https://hnrss.org/newest")

        assert source.enabled is True
        assert source.is_builtin is False
        lock_sql = mock_database.execute.call_args.args[0]
        assert "pg_advisory_xact_lock" in lock_sql
        mock_database.transaction.assert_called_once()

    @pytest.mark.asyncio
    async def test_second_rss_over_quota(
        self, registry: SourceRegistry, mock_database: AsyncMock
    ) -> None:
        mock_database.fetchval.return_value = 1

        with pytest.raises(QuotaExceededError) as exc_info:
            await registry.create("rss", "Second", "https://example.com/feed")

        assert exc_info.value.context["limit"] == 1
        mock_database.fetchrow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unlimited_rss_skips_count(
        self, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        registry = SourceRegistry(mock_database, PlanConfig(is_pro=False, max_rss=-1))
        mock_database.fetchrow.return_value = sample_db_row

        await registry.create("rss", "HN", "https://hnrss.org/newest")

        mock_database.fetchval.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_type_rejected(self, registry: SourceRegistry) -> None:
        with pytest.raises(InvalidSourceTypeError):
            await registry.create("mastodon", "Toots")

    @pytest.mark.asyncio
    async def test_reddit_requires_pro(self, registry: SourceRegistry) -> None:
        with pytest.raises(InvalidSourceTypeError):
            await registry.create("reddit", "SaaS")

    @pytest.mark.asyncio
    async def test_reddit_allowed_on_pro(
        self, mock_database: AsyncMock
    ) -> None:
        registry = SourceRegistry(mock_database, PlanConfig(is_pro=True))
        mock_database.fetchrow.return_value = make_source_row(type="reddit", name="SaaS", url=None)

        source = await registry.create("reddit", "SaaS")

        assert source.type is SourceType.REDDIT

    @pytest.mark.asyncio
    async def test_blank_name_rejected(self, registry: SourceRegistry) -> None:
        with pytest.raises(ValidationError):
            await registry.create("rss", "   ", "https://example.com/feed")

    @pytest.mark.asyncio
    async def test_rss_requires_url(self, registry: SourceRegistry) -> None:
        with pytest.raises(ValidationError):
            await registry.create("rss", "No feed")


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_get_unknown_raises(self, registry: SourceRegistry) -> None:
        with pytest.raises(NotFoundError):
            await registry.get(404)

    @pytest.mark.asyncio
    async def test_toggle_builtin_allowed(
        self, registry: SourceRegistry, mock_database: AsyncMock, builtin_db_row: dict
    ) -> None:
        builtin_db_row["enabled"] = False
        mock_database.fetchrow.return_value = builtin_db_row

        source = await registry.toggle(2)

        assert source.is_builtin is True
        assert source.enabled is False

    @pytest.mark.asyncio
    async def test_toggle_unknown_raises(self, registry: SourceRegistry) -> None:
        with pytest.raises(NotFoundError):
            await registry.toggle(404)

    @pytest.mark.asyncio
    async def test_delete_builtin_forbidden(
        self, registry: SourceRegistry, mock_database: AsyncMock, builtin_db_row: dict
    ) -> None:
        mock_database.fetchrow.return_value = builtin_db_row

        with pytest.raises(ForbiddenError):
            await registry.delete(2)

        mock_database.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_user_source(
        self, registry: SourceRegistry, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        mock_database.fetchrow.return_value = sample_db_row
        mock_database.execute.return_value = "DELETE 1"

        await registry.delete(1)

        assert mock_database.execute.call_args.args[1] == 1

    @pytest.mark.asyncio
    async def test_delete_unknown_raises(self, registry: SourceRegistry) -> None:
        with pytest.raises(NotFoundError):
            await registry.delete(404)


class TestUpdate:
    @pytest.mark.asyncio
    async def test_renames_and_keeps_other_fields(
        self, registry: SourceRegistry, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        renamed = dict(sample_db_row, name="Renamed")
        mock_database.fetchrow.side_effect = [sample_db_row, renamed]

        source = await registry.update(1, name="  Renamed  ")

        assert source.name == "Renamed"
        args = mock_database.fetchrow.call_args.args
        assert "UPDATE sources" in args[0]
        assert args[1:] == (1, "Renamed", "https://hnrss.org/newest", "{}", True)

    @pytest.mark.asyncio
    async def test_replaces_config_and_enabled(
        self, registry: SourceRegistry, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        mock_database.fetchrow.side_effect = [sample_db_row, sample_db_row]

        await registry.update(1, config={"max_entries": 5}, enabled=False)

        args = mock_database.fetchrow.call_args.args
        assert args[4] == '{"max_entries": 5}'
        assert args[5] is False

    @pytest.mark.asyncio
    async def test_builtin_forbidden(
        self, registry: SourceRegistry, mock_database: AsyncMock, builtin_db_row: dict
    ) -> None:
        mock_database.fetchrow.return_value = builtin_db_row

        with pytest.raises(ForbiddenError):
            await registry.update(2, name="Mine now")

        assert mock_database.fetchrow.await_count == 1

    @pytest.mark.asyncio
    async def test_unknown_raises(self, registry: SourceRegistry) -> None:
        with pytest.raises(NotFoundError):
            await registry.update(404, name="x")

    @pytest.mark.asyncio
    async def test_blank_name_rejected(
        self, registry: SourceRegistry, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        mock_database.fetchrow.return_value = sample_db_row

        with pytest.raises(ValidationError):
            await registry.update(1, name="   ")

    @pytest.mark.asyncio
    async def test_rss_url_cannot_be_cleared(
        self, registry: SourceRegistry, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        mock_database.fetchrow.return_value = sample_db_row

        with pytest.raises(ValidationError):
            await registry.update(1, url="")

    @pytest.mark.asyncio
    async def test_deleted_during_update_raises(
        self, registry: SourceRegistry, mock_database: AsyncMock, sample_db_row: dict
    ) -> None:
        mock_database.fetchrow.side_effect = [sample_db_row, None]

        with pytest.raises(NotFoundError):
            await registry.update(1, enabled=False)


class TestTypes:
    def test_free_plan(self, registry: SourceRegistry) -> None:
        info = registry.types()

        assert info == {
            "types": ["hackernews", "github", "npm", "devto", "rss"],
            "is_pro": False,
            "max_rss": 1,
        }

    def test_pro_plan_unlimited(self, mock_database: AsyncMock) -> None:
        info = SourceRegistry(mock_database, PlanConfig(is_pro=True)).types()

        assert "reddit" in info["types"]
        assert info["max_rss"] == -1


class TestSeeding:
    @pytest.mark.asyncio
    async def test_seeds_builtins_once(
        self, registry: SourceRegistry, mock_database: AsyncMock, builtin_db_row: dict
    ) -> None:
        mock_database.fetchval.return_value = 0
        mock_database.fetchrow.return_value = builtin_db_row

        inserted = await registry.ensure_seeded()

        assert inserted == len(BUILTIN_SOURCES) == 4
        inserted_names = [c.args[2] for c in mock_database.fetchrow.call_args_list]
        assert inserted_names == ["Hacker News", "GitHub Trending", "npm Registry", "DEV.to"]
        assert all(c.args[6] is True for c in mock_database.fetchrow.call_args_list)

    @pytest.mark.asyncio
    async def test_skips_when_builtins_exist(
        self, registry: SourceRegistry, mock_database: AsyncMock
    ) -> None:
        mock_database.fetchval.return_value = 4

        assert await registry.ensure_seeded() == 0
        mock_database.fetchrow.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_disabled_by_config(self, mock_database: AsyncMock) -> None:
        registry = SourceRegistry(
            mock_database,
            PlanConfig(),
            SourcesConfig(seed_on_init=False),
        )

        assert await registry.ensure_seeded() == 0
        mock_database.fetchval.assert_not_awaited()
