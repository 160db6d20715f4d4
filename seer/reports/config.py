"""Configuration for the optional AI summarizer.

All settings can be overridden via SUMMARIZER_* environment variables.

Example:
    SUMMARIZER_PROVIDER=anthropic
    SUMMARIZER_API_KEY=sk-ant-...
    SUMMARIZER_TIMEOUT_SECONDS=15
"""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
}


class SummarizerConfig(BaseSettings):
    """Provider selection, credentials and failure handling for report analysis."""

    model_config = SettingsConfigDict(
        env_prefix="SUMMARIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    provider: Literal["none", "openai", "anthropic"] = Field(
        default="none",
        description="LLM provider used to annotate reports ('none' disables it)",
    )
    api_key: SecretStr | None = Field(default=None, description="Provider API key")
    model: str | None = Field(
        default=None,
        description="Model name (provider default when unset)",
    )
    base_url: str | None = Field(
        default=None,
        description="Override the provider endpoint (OpenAI-compatible gateways)",
    )
    max_tokens: int = Field(default=2048, ge=64, le=16384)
    timeout_seconds: float = Field(
        default=20.0,
        ge=1.0,
        le=600.0,
        description="Hard bound on one summarizer call",
    )
    summary_max_chars: int = Field(default=500, ge=50)

    # Circuit breaker
    circuit_failure_threshold: int = Field(default=3, ge=1)
    circuit_recovery_timeout: float = Field(default=300.0, ge=1.0)

    @property
    def enabled(self) -> bool:
        return self.provider != "none" and self.api_key is not None

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS.get(self.provider, "")
