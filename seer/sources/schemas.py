"""Data models for the sources module."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class SourceType(str, Enum):
    """Adapter kind a source is fetched with."""

    HACKERNEWS = "hackernews"
    GITHUB = "github"
    NPM = "npm"
    DEVTO = "devto"
    RSS = "rss"
    REDDIT = "reddit"


@dataclass
class Source:
    """A configured external feed or provider.

    Built-in sources are seeded by the service and can be toggled but never
    deleted. ``config`` holds adapter-specific options (e.g. subreddits).
    """

    type: SourceType
    name: str
    url: str | None = None
    config: dict = field(default_factory=dict)
    enabled: bool = True
    is_builtin: bool = False
    id: int | None = None
    created_at: datetime | None = None


# Seeded on first start when the registry holds no built-ins
BUILTIN_SOURCES: tuple[tuple[SourceType, str], ...] = (
    (SourceType.HACKERNEWS, "Hacker News"),
    (SourceType.GITHUB, "GitHub Trending"),
    (SourceType.NPM, "npm Registry"),
    (SourceType.DEVTO, "DEV.to"),
)
