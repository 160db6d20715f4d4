"""Sources: the registry of feeds and providers the fetcher polls."""

from seer.sources.config import PlanConfig, SourcesConfig
from seer.sources.repository import SourcesRepository
from seer.sources.schemas import Source, SourceType
from seer.sources.service import SourceRegistry

__all__ = [
    "PlanConfig",
    "Source",
    "SourceRegistry",
    "SourceType",
    "SourcesConfig",
    "SourcesRepository",
]
