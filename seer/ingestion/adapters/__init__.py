"""Adapter registry: one handler pair per SourceType.

New source kinds are added by writing a module with ``fetch_raw`` and
``transform`` and registering its AdapterSpec here or via
``register_adapter``.
"""

from seer.errors import InvalidSourceTypeError
from seer.ingestion.adapters import devto, github, hackernews, npm, reddit, rss
from seer.ingestion.adapters.base import AdapterResult, AdapterSpec, collect
from seer.sources.schemas import SourceType

ADAPTERS: dict[SourceType, AdapterSpec] = {
    spec.source_type: spec
    for spec in (
        hackernews.SPEC,
        github.SPEC,
        npm.SPEC,
        devto.SPEC,
        rss.SPEC,
        reddit.SPEC,
    )
}


def register_adapter(spec: AdapterSpec) -> AdapterSpec:
    """Register (or replace) the handler pair for a source type."""
    ADAPTERS[spec.source_type] = spec
    return spec


def get_adapter(source_type: SourceType | str) -> AdapterSpec:
    try:
        return ADAPTERS[SourceType(source_type)]
    except (KeyError, ValueError):
        raise InvalidSourceTypeError(
            f"No adapter registered for source type '{source_type}'",
            source_type=str(source_type),
        ) from None


__all__ = [
    "ADAPTERS",
    "AdapterResult",
    "AdapterSpec",
    "collect",
    "get_adapter",
    "register_adapter",
]
