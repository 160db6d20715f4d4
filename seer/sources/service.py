"""Source registry: validation, plan limits and built-in seeding."""

import logging

from seer.errors import (
    ForbiddenError,
    InvalidSourceTypeError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from seer.sources.config import PlanConfig, SourcesConfig
from seer.sources.repository import SourcesRepository
from seer.sources.schemas import BUILTIN_SOURCES, Source, SourceType
from seer.storage.database import Database

logger = logging.getLogger(__name__)


class SourceRegistry:
    """Holds configured sources and enforces the active plan.

    The plan is fixed at construction; build a new registry to change it.
    """

    def __init__(
        self,
        database: Database,
        plan: PlanConfig,
        config: SourcesConfig | None = None,
    ) -> None:
        self._db = database
        self._plan = plan
        self._config = config or SourcesConfig()
        self._repo = SourcesRepository(database)

    @property
    def plan(self) -> PlanConfig:
        return self._plan

    @property
    def repository(self) -> SourcesRepository:
        """Access the underlying repository for direct DB operations."""
        return self._repo

    async def create(
        self,
        source_type: str,
        name: str,
        url: str | None = None,
        config: dict | None = None,
    ) -> Source:
        """Register a user source.

        Raises:
            InvalidSourceTypeError: type unknown or not active on this plan
            ValidationError: blank name, or an RSS source without a URL
            QuotaExceededError: the plan's RSS limit is already reached
        """
        if not self._plan.allows(source_type):
            raise InvalidSourceTypeError(
                f"Source type '{source_type}' is not available on this plan",
                source_type=source_type,
            )
        kind = SourceType(source_type)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Source name must not be empty")
        url = url.strip() if url else None
        if kind is SourceType.RSS and not url:
            raise ValidationError("RSS sources require a feed URL")

        source = Source(type=kind, name=name, url=url, config=config or {})
        limit = self._plan.rss_limit if kind is SourceType.RSS else None

        async with self._db.transaction() as conn:
            if limit is not None:
                await self._repo.lock_type(kind, conn)
                current = await self._repo.count_by_type(kind, conn)
                if current >= limit:
                    raise QuotaExceededError(
                        f"Plan allows at most {limit} RSS sources",
                        limit=limit,
                    )
            created = await self._repo.insert(source, conn)

        logger.info("Source created id=%s type=%s", created.id, kind.value)
        return created

    async def list_sources(self) -> list[Source]:
        return await self._repo.list_all()

    async def get(self, source_id: int) -> Source:
        source = await self._repo.get_by_id(source_id)
        if source is None:
            raise NotFoundError("Source", source_id)
        return source

    async def list_enabled(self) -> list[Source]:
        return await self._repo.list_enabled()

    async def toggle(self, source_id: int) -> Source:
        """Flip ``enabled``. Allowed for built-in sources."""
        source = await self._repo.toggle(source_id)
        if source is None:
            raise NotFoundError("Source", source_id)
        logger.info("Source toggled id=%s enabled=%s", source_id, source.enabled)
        return source

    async def update(
        self,
        source_id: int,
        name: str | None = None,
        url: str | None = None,
        config: dict | None = None,
        enabled: bool | None = None,
    ) -> Source:
        """Edit a user source. Fields left as None keep their value.

        The type cannot change, so the RSS quota is unaffected.

        Raises:
            NotFoundError: unknown id
            ForbiddenError: built-in sources are read-only apart from toggle
            ValidationError: blank name, or an RSS source left without a URL
        """
        source = await self.get(source_id)
        if source.is_builtin:
            raise ForbiddenError(
                f"Built-in source {source_id} cannot be modified",
                source_id=source_id,
            )

        new_name = source.name
        if name is not None:
            new_name = name.strip()
            if not new_name:
                raise ValidationError("Source name must not be empty")

        # An empty string clears the URL
        new_url = source.url
        if url is not None:
            new_url = url.strip() or None
            if source.type is SourceType.RSS and not new_url:
                raise ValidationError("RSS sources require a feed URL")

        updated = await self._repo.update(
            source_id,
            name=new_name,
            url=new_url,
            config=config if config is not None else source.config,
            enabled=enabled if enabled is not None else source.enabled,
        )
        if updated is None:
            raise NotFoundError("Source", source_id)
        logger.info("Source updated id=%s", source_id)
        return updated

    async def delete(self, source_id: int) -> None:
        """Remove a user source. Its opportunities are kept."""
        source = await self.get(source_id)
        if source.is_builtin:
            raise ForbiddenError(
                f"Built-in source {source_id} cannot be deleted",
                source_id=source_id,
            )
        if not await self._repo.delete_user_source(source_id):
            raise NotFoundError("Source", source_id)
        logger.info("Source deleted id=%s", source_id)

    def types(self) -> dict:
        """Source kinds and quotas active for the plan."""
        return {
            "types": [t.value for t in self._plan.types],
            "is_pro": self._plan.is_pro,
            "max_rss": self._plan.rss_limit if self._plan.rss_limit is not None else -1,
        }

    async def ensure_seeded(self) -> int:
        """Insert the built-in sources if none exist.

        Returns the number of sources inserted.
        """
        if not self._config.seed_on_init:
            return 0
        if await self._repo.count_builtin() > 0:
            return 0

        inserted = 0
        for kind, name in BUILTIN_SOURCES:
            await self._repo.insert(Source(type=kind, name=name, is_builtin=True))
            inserted += 1

        logger.info("Seeded %d built-in sources", inserted)
        return inserted
