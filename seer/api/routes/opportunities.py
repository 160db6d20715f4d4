"""Read-only opportunity endpoints."""

from fastapi import APIRouter, Depends, Query

from seer.api.dependencies import get_opportunity_store
from seer.api.models import ErrorResponse, OpportunityItem, StatsResponse
from seer.opportunities.service import MAX_PAGE_SIZE, OpportunityStore

router = APIRouter()


@router.get(
    "/opportunities",
    response_model=list[OpportunityItem],
    summary="List opportunities, newest first",
)
async def list_opportunities(
    source: str | None = Query(default=None, description="Filter by source type"),
    min_score: float | None = Query(default=None, ge=0, le=100, description="Minimum score"),
    limit: int = Query(default=50, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    store: OpportunityStore = Depends(get_opportunity_store),
) -> list[OpportunityItem]:
    opportunities = await store.query(
        source=source,
        min_score=min_score,
        limit=limit,
        offset=offset,
    )
    return [OpportunityItem.from_opportunity(o) for o in opportunities]


@router.get(
    "/opportunities/stats",
    response_model=StatsResponse,
    summary="Aggregate counts and average score",
)
async def opportunity_stats(
    source: str | None = Query(default=None),
    min_score: float | None = Query(default=None, ge=0, le=100),
    store: OpportunityStore = Depends(get_opportunity_store),
) -> StatsResponse:
    stats = await store.stats(source=source, min_score=min_score)
    return StatsResponse.from_stats(stats)


@router.get(
    "/opportunities/{opportunity_id}",
    response_model=OpportunityItem,
    responses={404: {"model": ErrorResponse}},
    summary="Get a single opportunity",
)
async def get_opportunity(
    opportunity_id: int,
    store: OpportunityStore = Depends(get_opportunity_store),
) -> OpportunityItem:
    return OpportunityItem.from_opportunity(await store.get(opportunity_id))
