"""Source registry endpoints and the manual fetch trigger."""

import structlog
from fastapi import APIRouter, Depends, Query, Response, status

from seer.api.dependencies import get_scheduler, get_source_registry
from seer.api.models import (
    CreateSourceRequest,
    ErrorResponse,
    FetchResponse,
    SourceItem,
    SourceTypesResponse,
    UpdateSourceRequest,
)
from seer.ingestion.scheduler import FetchScheduler
from seer.sources.service import SourceRegistry

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get(
    "/sources",
    response_model=list[SourceItem],
    summary="List all sources",
)
async def list_sources(
    registry: SourceRegistry = Depends(get_source_registry),
) -> list[SourceItem]:
    sources = await registry.list_sources()
    return [SourceItem.from_source(s) for s in sources]


@router.get(
    "/sources/types",
    response_model=SourceTypesResponse,
    summary="Source types and quotas for the active plan",
)
async def source_types(
    registry: SourceRegistry = Depends(get_source_registry),
) -> SourceTypesResponse:
    return SourceTypesResponse(**registry.types())


@router.post(
    "/sources/fetch",
    response_model=FetchResponse,
    responses={409: {"model": ErrorResponse}},
    summary="Fetch all enabled sources now",
)
async def trigger_fetch(
    wait: bool = Query(default=True, description="Wait for the cycle to finish"),
    scheduler: FetchScheduler = Depends(get_scheduler),
) -> FetchResponse:
    if not wait:
        scheduler.trigger()
        logger.info("Manual fetch started in background")
        return FetchResponse(status="started", message="Fetch started in background")

    summary = await scheduler.run_once()
    return FetchResponse(**summary.to_dict())


@router.post(
    "/sources",
    response_model=SourceItem,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Register a user source",
)
async def create_source(
    body: CreateSourceRequest,
    registry: SourceRegistry = Depends(get_source_registry),
) -> SourceItem:
    source = await registry.create(
        source_type=body.type,
        name=body.name,
        url=body.url,
        config=body.config,
    )
    return SourceItem.from_source(source)


@router.get(
    "/sources/{source_id}",
    response_model=SourceItem,
    responses={404: {"model": ErrorResponse}},
    summary="Get a single source",
)
async def get_source(
    source_id: int,
    registry: SourceRegistry = Depends(get_source_registry),
) -> SourceItem:
    return SourceItem.from_source(await registry.get(source_id))


@router.put(
    "/sources/{source_id}",
    response_model=SourceItem,
    responses={
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Edit a user source",
)
async def update_source(
    source_id: int,
    body: UpdateSourceRequest,
    registry: SourceRegistry = Depends(get_source_registry),
) -> SourceItem:
    source = await registry.update(
        source_id,
        name=body.name,
        url=body.url,
        config=body.config,
        enabled=body.enabled,
    )
    return SourceItem.from_source(source)


@router.post(
    "/sources/{source_id}/toggle",
    response_model=SourceItem,
    responses={404: {"model": ErrorResponse}},
    summary="Enable or disable a source",
)
async def toggle_source(
    source_id: int,
    registry: SourceRegistry = Depends(get_source_registry),
) -> SourceItem:
    return SourceItem.from_source(await registry.toggle(source_id))


@router.delete(
    "/sources/{source_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete a user source",
)
async def delete_source(
    source_id: int,
    registry: SourceRegistry = Depends(get_source_registry),
) -> Response:
    await registry.delete(source_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
