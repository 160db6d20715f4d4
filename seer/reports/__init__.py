"""Reports: windowed digests of opportunities with optional AI analysis."""

from seer.reports.circuit_breaker import CircuitBreaker, CircuitOpenError, CircuitState
from seer.reports.config import SummarizerConfig
from seer.reports.repository import ReportRepository
from seer.reports.schemas import Report, SummaryResult
from seer.reports.service import ReportService
from seer.reports.summarizer import Summarizer

__all__ = [
    "CircuitBreaker",
    "CircuitOpenError",
    "CircuitState",
    "Report",
    "ReportRepository",
    "ReportService",
    "Summarizer",
    "SummarizerConfig",
    "SummaryResult",
]
