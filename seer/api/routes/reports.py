"""
Report endpoints.

The same router is mounted under ``/reports`` and ``/prompts``; the two
prefixes are aliases.
"""

from fastapi import APIRouter, Body, Depends, Query
from fastapi.responses import PlainTextResponse

from seer.api.dependencies import get_report_service
from seer.api.models import ErrorResponse, GenerateReportRequest, ReportItem
from seer.reports.service import MAX_LIST_LIMIT, ReportService

router = APIRouter()


@router.get(
    "",
    response_model=list[ReportItem],
    summary="List reports, newest first",
)
async def list_reports(
    limit: int = Query(default=50, ge=1, le=MAX_LIST_LIMIT),
    offset: int = Query(default=0, ge=0),
    service: ReportService = Depends(get_report_service),
) -> list[ReportItem]:
    reports = await service.list_reports(limit=limit, offset=offset)
    return [ReportItem.from_report(r) for r in reports]


@router.post(
    "",
    response_model=ReportItem,
    responses={422: {"model": ErrorResponse}},
    summary="Generate a report for a window",
)
async def create_report(
    body: GenerateReportRequest | None = Body(default=None),
    service: ReportService = Depends(get_report_service),
) -> ReportItem:
    body = body or GenerateReportRequest()
    report = await service.generate(start=body.start, end=body.end)
    return ReportItem.from_report(report)


@router.post(
    "/generate",
    response_model=ReportItem,
    responses={422: {"model": ErrorResponse}},
    summary="Generate a report (window as query parameters)",
)
async def generate_report(
    start: str | None = Query(default=None, description="YYYY-MM-DD or ISO-8601"),
    end: str | None = Query(default=None, description="YYYY-MM-DD or ISO-8601"),
    service: ReportService = Depends(get_report_service),
) -> ReportItem:
    report = await service.generate(start=start, end=end)
    return ReportItem.from_report(report)


@router.get(
    "/{report_id}",
    response_model=ReportItem,
    responses={404: {"model": ErrorResponse}},
    summary="Get a single report",
)
async def get_report(
    report_id: int,
    service: ReportService = Depends(get_report_service),
) -> ReportItem:
    return ReportItem.from_report(await service.get(report_id))


@router.get(
    "/{report_id}/prompt",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Raw LLM prompt of a report",
)
async def get_report_prompt(
    report_id: int,
    service: ReportService = Depends(get_report_service),
) -> PlainTextResponse:
    return PlainTextResponse(await service.get_content(report_id))


@router.get(
    "/{report_id}/content",
    response_class=PlainTextResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Raw LLM prompt of a report (alias of /prompt)",
)
async def get_report_content(
    report_id: int,
    service: ReportService = Depends(get_report_service),
) -> PlainTextResponse:
    return PlainTextResponse(await service.get_content(report_id))
