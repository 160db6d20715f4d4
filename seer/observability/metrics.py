"""
Prometheus metrics for the fetch, scoring and report pipeline.

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from seer.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for latency histograms (in seconds)
LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0)


class MetricsCollector:
    """
    Prometheus metrics collector for seer.

    Usage:
        metrics = get_metrics()
        metrics.record_fetch("hackernews", items=20, created=4, latency=1.2)
    """

    def __init__(self):
        self.items_fetched = Counter(
            "seer_items_fetched_total",
            "Raw items produced by source adapters",
            ["source_type"],
        )

        self.opportunities_created = Counter(
            "seer_opportunities_created_total",
            "Opportunities inserted on first sighting",
            ["source_type"],
        )

        self.duplicates_skipped = Counter(
            "seer_duplicates_skipped_total",
            "Items discarded because the opportunity already existed",
            ["source_type"],
        )

        self.items_filtered = Counter(
            "seer_items_filtered_total",
            "Items dropped by keyword include/exclude filters",
            ["source_type"],
        )

        self.adapter_errors = Counter(
            "seer_adapter_errors_total",
            "Adapter failures (whole source or single entry)",
            ["source_type", "error_type"],
        )

        self.fetch_latency = Histogram(
            "seer_fetch_latency_seconds",
            "Time to fetch and process one source",
            ["source_type"],
            buckets=LATENCY_BUCKETS,
        )

        self.fetch_cycles = Counter(
            "seer_fetch_cycles_total",
            "Completed fetch cycles by outcome",
            ["status"],
        )

        self.last_fetch_timestamp = Gauge(
            "seer_last_fetch_timestamp_seconds",
            "Unix time of the last completed fetch cycle",
        )

        self.reports_generated = Counter(
            "seer_reports_generated_total",
            "Generated reports by summarizer outcome",
            ["summarizer"],  # ok, unavailable, disabled
        )

        self.alerts_sent = Counter(
            "seer_alerts_total",
            "Opportunity alert deliveries by channel and outcome",
            ["channel", "outcome"],  # sent, failed
        )

        logger.info("Prometheus metrics initialized")

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info(f"Prometheus metrics server started on port {port}")

    def record_fetch(
        self,
        source_type: str,
        items: int = 0,
        created: int = 0,
        duplicates: int = 0,
        filtered: int = 0,
        latency: float | None = None,
    ) -> None:
        """Record the outcome of a single successful source fetch."""
        self.items_fetched.labels(source_type=source_type).inc(items)
        self.opportunities_created.labels(source_type=source_type).inc(created)
        self.duplicates_skipped.labels(source_type=source_type).inc(duplicates)
        self.items_filtered.labels(source_type=source_type).inc(filtered)

        if latency is not None:
            self.fetch_latency.labels(source_type=source_type).observe(latency)

    def record_error(self, source_type: str, error_type: str) -> None:
        """Record an adapter error."""
        self.adapter_errors.labels(
            source_type=source_type,
            error_type=error_type,
        ).inc()

    def record_cycle(self, status: str, finished_at: float) -> None:
        self.fetch_cycles.labels(status=status).inc()
        self.last_fetch_timestamp.set(finished_at)

    def record_report(self, summarizer: str) -> None:
        self.reports_generated.labels(summarizer=summarizer).inc()

    def record_alert(self, channel: str, outcome: str) -> None:
        self.alerts_sent.labels(channel=channel, outcome=outcome).inc()


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
