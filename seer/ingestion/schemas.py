"""
Normalized item schema produced by every source adapter.

A RawItem is transient: adapters produce it, the deduplicator scores it and
either stores it as an Opportunity or discards it. Field names are shared by
all adapters and by the scorer.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from seer.sources.schemas import SourceType


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


class RawItem(BaseModel):
    """One discovered item, normalized across source kinds."""

    source_id: int | None = Field(
        default=None,
        description="Registry id of the source this item came from",
    )
    source_type: SourceType = Field(..., description="Adapter kind")
    external_id: str = Field(
        ...,
        min_length=1,
        description="Identifier of the item at the source (dedup key with source_type)",
    )
    title: str = Field(..., min_length=1)
    body: str = Field(default="", description="Plain-text description or excerpt")
    url: str = Field(default="", description="Link to the item")
    published_at: datetime = Field(default_factory=_utc_now)

    # Engagement numbers used by heuristic signals (points, stars, comments...)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @field_validator("title", "body")
    @classmethod
    def normalize_whitespace(cls, v: str) -> str:
        return " ".join(v.split())

    @field_validator("published_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @property
    def text(self) -> str:
        """Text the scorer matches against."""
        return f"{self.title} {self.body}"
