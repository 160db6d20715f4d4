"""Alert configuration.

All settings can be overridden via ``ALERTS_*`` environment variables.
Alerts only run on the pro plan.

Example:
    ALERTS_ENABLED=true
    ALERTS_MIN_SCORE=60
    ALERTS_SLACK_WEBHOOK_URL=https://hooks.slack.com/services/...
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AlertConfig(BaseSettings):
    """Where and when to notify about new opportunities."""

    model_config = SettingsConfigDict(
        env_prefix="ALERTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    enabled: bool = Field(default=False, description="Send alerts for new opportunities")
    min_score: float = Field(
        default=70.0,
        ge=0.0,
        le=100.0,
        description="Only opportunities scoring at least this much trigger an alert",
    )
    webhook_url: str | None = Field(default=None, description="Generic JSON webhook")
    slack_webhook_url: str | None = Field(default=None, description="Slack incoming webhook")
    timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)

    @property
    def has_destination(self) -> bool:
        return bool(self.webhook_url or self.slack_webhook_url)
