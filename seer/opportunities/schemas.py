"""Data models for stored opportunities."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Opportunity:
    """A scored, deduplicated item.

    ``(source_type, source_id_external)`` is unique across the table.
    """

    title: str
    source_type: str
    source_id_external: str
    description: str = ""
    source_url: str = ""
    score: float = 0.0
    signals: list[str] = field(default_factory=list)
    source_id: int | None = None
    metadata: dict = field(default_factory=dict)
    published_at: datetime | None = None
    id: int | None = None
    detected_at: datetime | None = None
    created_at: datetime | None = None


@dataclass
class OpportunityStats:
    total: int = 0
    by_source: dict[str, int] = field(default_factory=dict)
    average_score: float = 0.0
    today: int = 0
