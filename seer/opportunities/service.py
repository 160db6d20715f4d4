"""Read-side access to stored opportunities."""

from seer.errors import NotFoundError, ValidationError
from seer.opportunities.repository import OpportunityRepository
from seer.opportunities.schemas import Opportunity, OpportunityStats
from seer.storage.database import Database

MAX_PAGE_SIZE = 1000


class OpportunityStore:
    def __init__(self, database: Database) -> None:
        self._repo = OpportunityRepository(database)

    @property
    def repository(self) -> OpportunityRepository:
        return self._repo

    async def query(
        self,
        source: str | None = None,
        min_score: float | None = None,
        limit: int | None = 50,
        offset: int = 0,
    ) -> list[Opportunity]:
        """Filtered page, newest first. ``limit=None`` means unlimited."""
        if limit is not None and not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        if offset < 0:
            raise ValidationError("offset must not be negative")
        return await self._repo.query(source, min_score, limit, offset)

    async def get(self, opportunity_id: int) -> Opportunity:
        opportunity = await self._repo.get_by_id(opportunity_id)
        if opportunity is None:
            raise NotFoundError("Opportunity", opportunity_id)
        return opportunity

    async def stats(
        self,
        source: str | None = None,
        min_score: float | None = None,
    ) -> OpportunityStats:
        return await self._repo.stats(source, min_score)
