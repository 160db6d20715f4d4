"""
Component factories shared by the API and the CLI.

Each builder takes an already-connected Database and the process settings,
so the same wiring is used for ``seer serve`` and one-shot CLI commands.
"""

import structlog

from seer.alerts.config import AlertConfig
from seer.alerts.notifier import AlertNotifier
from seer.config.settings import Settings, get_settings
from seer.ingestion.fetcher import Fetcher, FetcherConfig
from seer.ingestion.scheduler import FetchScheduler
from seer.opportunities.repository import OpportunityRepository
from seer.reports.config import SummarizerConfig
from seer.reports.service import ReportService
from seer.reports.summarizer import Summarizer
from seer.scoring.deduplicator import Deduplicator
from seer.scoring.scorer import Scorer
from seer.sources.config import PlanConfig, SourcesConfig
from seer.sources.service import SourceRegistry
from seer.storage.database import Database

logger = structlog.get_logger(__name__)

# Share of the request timeout a report may spend waiting on the summarizer
SUMMARIZER_BUDGET_SHARE = 0.75


def build_source_registry(database: Database, settings: Settings | None = None) -> SourceRegistry:
    settings = settings or get_settings()
    plan = PlanConfig.from_settings(settings)
    logger.info("Plan loaded", is_pro=plan.is_pro, max_rss=plan.max_rss)
    return SourceRegistry(database, plan, SourcesConfig())


def build_alert_notifier(
    plan: PlanConfig, config: AlertConfig | None = None
) -> AlertNotifier | None:
    """Alerts are a pro-plan feature; other plans never get a notifier."""
    if not plan.is_pro:
        return None
    notifier = AlertNotifier.from_config(config)
    if notifier is None:
        logger.info("Opportunity alerts disabled")
    else:
        logger.info(
            "Opportunity alerts enabled",
            channels=[c.name for c in notifier.channels],
            min_score=notifier.min_score,
        )
    return notifier


def build_fetcher(
    database: Database,
    settings: Settings | None = None,
    registry: SourceRegistry | None = None,
) -> Fetcher:
    settings = settings or get_settings()
    registry = registry or build_source_registry(database, settings)
    deduplicator = Deduplicator(
        OpportunityRepository(database),
        Scorer.from_config(),
        build_alert_notifier(registry.plan),
    )
    config = FetcherConfig(
        concurrency=settings.fetch_concurrency,
        source_timeout_seconds=settings.fetch_source_timeout_seconds,
        http_timeout_seconds=settings.fetch_http_timeout_seconds,
        max_retries=settings.max_http_retries,
        max_backoff_seconds=settings.max_backoff_seconds,
        user_agent=settings.fetch_user_agent,
    )
    return Fetcher(registry, deduplicator, config)


def build_scheduler(fetcher: Fetcher, settings: Settings | None = None) -> FetchScheduler:
    settings = settings or get_settings()
    return FetchScheduler(fetcher, interval_seconds=settings.fetch_interval_minutes * 60)


def bounded_summarizer_config(
    settings: Settings, config: SummarizerConfig | None = None
) -> SummarizerConfig:
    """
    Keep the summarizer timeout below the API request timeout.

    A report request that outlives the request timeout is answered with 504
    and nothing is stored, so the summarizer has to give up first and let
    the report be saved without an analysis.
    """
    config = config or SummarizerConfig()
    budget = settings.request_timeout_seconds
    if budget <= 0 or config.timeout_seconds < budget * SUMMARIZER_BUDGET_SHARE:
        return config

    bounded = round(budget * SUMMARIZER_BUDGET_SHARE, 2)
    logger.warning(
        "Summarizer timeout lowered below request timeout",
        configured=config.timeout_seconds,
        effective=bounded,
        request_timeout=budget,
    )
    return config.model_copy(update={"timeout_seconds": bounded})


def build_report_service(
    database: Database,
    settings: Settings | None = None,
    summarizer_config: SummarizerConfig | None = None,
) -> ReportService:
    settings = settings or get_settings()
    summarizer_config = bounded_summarizer_config(settings, summarizer_config)
    summarizer = Summarizer(summarizer_config) if summarizer_config.enabled else None
    if summarizer is None:
        logger.info("Report summarizer disabled")
    else:
        logger.info(
            "Report summarizer enabled",
            provider=summarizer_config.provider,
            model=summarizer_config.resolved_model,
        )
    return ReportService(database, summarizer, default_days=settings.report_default_days)
