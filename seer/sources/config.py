"""Configuration for the source registry."""

from dataclasses import dataclass

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from seer.config.settings import Settings
from seer.sources.schemas import SourceType

FREE_PLAN_TYPES: tuple[SourceType, ...] = (
    SourceType.HACKERNEWS,
    SourceType.GITHUB,
    SourceType.NPM,
    SourceType.DEVTO,
    SourceType.RSS,
)
PRO_PLAN_TYPES: tuple[SourceType, ...] = FREE_PLAN_TYPES + (SourceType.REDDIT,)


class SourcesConfig(BaseSettings):
    """Settings for source management."""

    model_config = SettingsConfigDict(
        env_prefix="SOURCES_",
        case_sensitive=False,
        extra="ignore",
    )

    seed_on_init: bool = Field(
        default=True,
        description="Insert the built-in sources on startup if none exist",
    )


@dataclass(frozen=True)
class PlanConfig:
    """Which source kinds and quotas are active.

    Passed to the registry explicitly; ``max_rss < 0`` means unlimited.
    The pro plan is never limited on RSS sources.
    """

    is_pro: bool = False
    max_rss: int = 2

    @property
    def types(self) -> tuple[SourceType, ...]:
        return PRO_PLAN_TYPES if self.is_pro else FREE_PLAN_TYPES

    @property
    def rss_limit(self) -> int | None:
        """Effective RSS cap, or None when unlimited."""
        if self.is_pro or self.max_rss < 0:
            return None
        return self.max_rss

    def allows(self, source_type: SourceType | str) -> bool:
        try:
            return SourceType(source_type) in self.types
        except ValueError:
            return False

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlanConfig":
        return cls(
            is_pro=settings.plan_is_pro,
            max_rss=-1 if settings.plan_is_pro else settings.plan_max_rss,
        )
