"""
Request and response models for the seer API.
"""

import datetime as dt

from pydantic import BaseModel, Field

from seer.opportunities.schemas import Opportunity, OpportunityStats
from seer.reports.schemas import Report
from seer.sources.schemas import Source


class ErrorResponse(BaseModel):
    """Response model for errors."""

    detail: str = Field(
        ...,
        description="Error message",
    )
    error_type: str = Field(
        default="internal",
        description="Machine-readable error code",
    )


class ComponentHealth(BaseModel):
    """Health status of a single infrastructure component."""

    status: str = Field(..., description="healthy or unhealthy")
    latency_ms: float | None = Field(default=None, description="Check latency")
    details: dict = Field(default_factory=dict)


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(default="ok", description="Always 'ok' while the process serves requests")
    timestamp: dt.datetime = Field(..., description="Server time (UTC)")
    version: str = Field(..., description="Service version")
    components: dict[str, ComponentHealth] = Field(
        default_factory=dict,
        description="Per-component health (database, scheduler)",
    )


# Sources


class SourceItem(BaseModel):
    """A configured source."""

    id: int
    type: str
    name: str
    url: str | None = None
    config: dict = Field(default_factory=dict)
    enabled: bool
    is_builtin: bool
    created_at: dt.datetime | None = None

    @classmethod
    def from_source(cls, source: Source) -> "SourceItem":
        return cls(
            id=source.id,
            type=source.type.value,
            name=source.name,
            url=source.url,
            config=source.config,
            enabled=source.enabled,
            is_builtin=source.is_builtin,
            created_at=source.created_at,
        )


class CreateSourceRequest(BaseModel):
    """Request body for registering a user source."""

    type: str = Field(..., description="Source type, e.g. 'rss'")
    name: str = Field(..., max_length=200, description="Display name")
    url: str | None = Field(default=None, max_length=2000, description="Feed URL (required for rss)")
    config: dict = Field(default_factory=dict, description="Adapter options")


class UpdateSourceRequest(BaseModel):
    """Request body for editing a user source. Omitted fields are unchanged."""

    name: str | None = Field(default=None, max_length=200)
    url: str | None = Field(default=None, max_length=2000, description="Empty string clears it")
    config: dict | None = Field(default=None, description="Replaces the adapter options")
    enabled: bool | None = None


class SourceTypesResponse(BaseModel):
    types: list[str] = Field(..., description="Source types active on this plan")
    is_pro: bool
    max_rss: int = Field(..., description="RSS source quota, -1 when unlimited")


class FetchResponse(BaseModel):
    """Outcome of a manual fetch trigger."""

    status: str = Field(..., description="completed, partial, failed, idle or started")
    message: str


# Opportunities


class OpportunityItem(BaseModel):
    id: int
    title: str
    description: str = ""
    source_type: str
    source_id: int | None = None
    source_id_external: str
    source_url: str = ""
    score: float
    signals: list[str] = Field(default_factory=list)
    metadata: dict = Field(default_factory=dict)
    published_at: dt.datetime | None = None
    detected_at: dt.datetime | None = None
    created_at: dt.datetime | None = None

    @classmethod
    def from_opportunity(cls, opp: Opportunity) -> "OpportunityItem":
        return cls(
            id=opp.id,
            title=opp.title,
            description=opp.description,
            source_type=opp.source_type,
            source_id=opp.source_id,
            source_id_external=opp.source_id_external,
            source_url=opp.source_url,
            score=opp.score,
            signals=list(opp.signals),
            metadata=opp.metadata,
            published_at=opp.published_at,
            detected_at=opp.detected_at,
            created_at=opp.created_at,
        )


class StatsResponse(BaseModel):
    total: int
    by_source: dict[str, int] = Field(default_factory=dict)
    average_score: float
    today: int = Field(..., description="Detected in the last 24 hours")

    @classmethod
    def from_stats(cls, stats: OpportunityStats) -> "StatsResponse":
        return cls(
            total=stats.total,
            by_source=stats.by_source,
            average_score=stats.average_score,
            today=stats.today,
        )


# Reports


class GenerateReportRequest(BaseModel):
    """Optional report window; YYYY-MM-DD or ISO-8601, naive values are UTC."""

    start: str | None = Field(default=None, description="Window start (inclusive)")
    end: str | None = Field(default=None, description="Window end (exclusive)")


class ReportItem(BaseModel):
    id: int
    period_start: dt.datetime
    period_end: dt.datetime
    opportunity_count: int
    content_human: str | None = None
    content_prompt: str | None = None
    summary: str | None = None
    ai_analysis: str | None = None
    generated_at: dt.datetime | None = None
    created_at: dt.datetime | None = None

    @classmethod
    def from_report(cls, report: Report) -> "ReportItem":
        return cls(
            id=report.id,
            period_start=report.period_start,
            period_end=report.period_end,
            opportunity_count=report.opportunity_count,
            content_human=report.content_human,
            content_prompt=report.content_prompt,
            summary=report.summary,
            ai_analysis=report.ai_analysis,
            generated_at=report.generated_at,
            created_at=report.created_at,
        )
