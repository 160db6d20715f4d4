"""Data models for reports and summarizer results."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Report:
    """A persisted digest of the opportunities detected in a window.

    Immutable once stored; generating again inserts a new row.
    """

    period_start: datetime
    period_end: datetime
    opportunity_count: int
    content_human: str | None = None
    content_prompt: str | None = None
    summary: str | None = None
    ai_analysis: str | None = None
    generated_at: datetime | None = None
    id: int | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class SummaryResult:
    """Either an AI annotation or an explicit "unavailable" marker."""

    available: bool
    summary: str | None = None
    analysis: str | None = None
    reason: str | None = None

    @classmethod
    def ok(cls, analysis: str, summary: str) -> "SummaryResult":
        return cls(available=True, summary=summary, analysis=analysis)

    @classmethod
    def unavailable(cls, reason: str) -> "SummaryResult":
        return cls(available=False, reason=reason)
