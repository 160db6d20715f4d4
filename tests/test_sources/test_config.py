"""Tests for PlanConfig."""

import pytest

from seer.config.settings import Settings
from seer.sources.config import PlanConfig
from seer.sources.schemas import SourceType


class TestPlanConfig:
    def test_free_plan_excludes_reddit(self) -> None:
        plan = PlanConfig()

        assert not plan.allows(SourceType.REDDIT)
        assert plan.allows("rss")
        assert plan.rss_limit == 2

    def test_pro_plan_is_unlimited(self) -> None:
        plan = PlanConfig(is_pro=True, max_rss=1)

        assert plan.allows("reddit")
        assert plan.rss_limit is None

    def test_negative_limit_is_unlimited(self) -> None:
        assert PlanConfig(max_rss=-1).rss_limit is None

    @pytest.mark.parametrize("value", ["", "gopher", "RSS"])
    def test_rejects_unknown_strings(self, value: str) -> None:
        assert PlanConfig().allows(value) is False

    def test_from_settings(self) -> None:
        settings = Settings(plan_is_pro=False, plan_max_rss=5)

        plan = PlanConfig.from_settings(settings)

        assert plan == PlanConfig(is_pro=False, max_rss=5)
