"""Logging and metrics for the seer service."""

from seer.observability.logging import bind_context, clear_context, get_logger, setup_logging
from seer.observability.metrics import MetricsCollector, get_metrics

__all__ = [
    "MetricsCollector",
    "bind_context",
    "clear_context",
    "get_logger",
    "get_metrics",
    "setup_logging",
]
