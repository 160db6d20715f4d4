"""Wiring of repositories, services and configs into runnable components."""

from seer.services.factory import (
    build_fetcher,
    build_report_service,
    build_scheduler,
    build_source_registry,
)

__all__ = [
    "build_fetcher",
    "build_report_service",
    "build_scheduler",
    "build_source_registry",
]
