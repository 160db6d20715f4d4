"""Configuration for opportunity scoring.

All settings can be overridden via SCORING_* environment variables.

Example:
    SCORING_RULES_FILE=/etc/seer/rules.json
    SCORING_EXCLUDE_KEYWORDS=crypto,nft
    SCORING_BOOST_KEYWORDS=self-hosted,postgres
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip().lower() for part in value.split(",") if part.strip())


class ScoringConfig(BaseSettings):
    """Rule source and keyword filters for the scorer."""

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    rules_file: Path | None = Field(
        default=None,
        description="JSON file replacing the built-in signal rules",
    )
    include_keywords: str = Field(
        default="",
        description="Comma-separated; when set, items must match at least one",
    )
    exclude_keywords: str = Field(
        default="",
        description="Comma-separated; items matching any are dropped",
    )
    boost_keywords: str = Field(
        default="",
        description="Comma-separated; each match adds boost_per_keyword points",
    )
    boost_per_keyword: float = Field(default=5.0, ge=0.0, le=100.0)
    max_boost: float = Field(default=20.0, ge=0.0, le=100.0)

    @property
    def include(self) -> tuple[str, ...]:
        return _csv(self.include_keywords)

    @property
    def exclude(self) -> tuple[str, ...]:
        return _csv(self.exclude_keywords)

    @property
    def boost(self) -> tuple[str, ...]:
        return _csv(self.boost_keywords)
