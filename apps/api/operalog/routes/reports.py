"""Daily report routes."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from operalog.routes.dependencies import get_any_context, get_report_service, get_user_context
from operalog.schemas.auth import AuthContext
from operalog.schemas.error import ErrorResponse
from operalog.schemas.report import (
    CreateReportRequest,
    DailyReport,
    ReportFilters,
    ReportPage,
    ReportStats,
    UpdateReportRequest,
)
from operalog.services.reports import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])

_NOT_FOUND_AND_DENIED = {
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


@router.get("", response_model=ReportPage, responses={401: {"model": ErrorResponse}})
async def list_reports(
    _: Annotated[AuthContext, Depends(get_user_context)],
    service: Annotated[ReportService, Depends(get_report_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    ship_id: Annotated[int | None, Query(ge=1)] = None,
    start_date: date | None = None,
    end_date: date | None = None,
) -> ReportPage:
    filters = ReportFilters(ship_id=ship_id, start_date=start_date, end_date=end_date)
    return await service.list_reports(filters, page=page, limit=limit)


@router.get("/stats", response_model=ReportStats, responses={401: {"model": ErrorResponse}})
async def report_stats(
    _: Annotated[AuthContext, Depends(get_user_context)],
    service: Annotated[ReportService, Depends(get_report_service)],
) -> ReportStats:
    return await service.stats()


@router.get(
    "/ship/{shipId}",
    response_model=list[DailyReport],
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def list_ship_reports(
    ship_id: Annotated[int, Path(alias="shipId")],
    context: Annotated[AuthContext, Depends(get_any_context)],
    service: Annotated[ReportService, Depends(get_report_service)],
) -> list[DailyReport]:
    return await service.list_ship_reports(context, ship_id)


@router.post(
    "",
    response_model=DailyReport,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
async def create_report(
    payload: CreateReportRequest,
    context: Annotated[AuthContext, Depends(get_any_context)],
    service: Annotated[ReportService, Depends(get_report_service)],
) -> DailyReport:
    return await service.create_report(context, payload)


@router.get("/{reportId}", response_model=DailyReport, responses=_NOT_FOUND_AND_DENIED)
async def get_report(
    report_id: Annotated[int, Path(alias="reportId")],
    context: Annotated[AuthContext, Depends(get_any_context)],
    service: Annotated[ReportService, Depends(get_report_service)],
) -> DailyReport:
    return await service.get_report(context, report_id)


@router.put(
    "/{reportId}",
    response_model=DailyReport,
    responses={400: {"model": ErrorResponse}, **_NOT_FOUND_AND_DENIED},
)
async def update_report(
    report_id: Annotated[int, Path(alias="reportId")],
    payload: UpdateReportRequest,
    context: Annotated[AuthContext, Depends(get_any_context)],
    service: Annotated[ReportService, Depends(get_report_service)],
) -> DailyReport:
    return await service.update_report(context, report_id, payload)


@router.delete(
    "/{reportId}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_report(
    report_id: Annotated[int, Path(alias="reportId")],
    _: Annotated[AuthContext, Depends(get_user_context)],
    service: Annotated[ReportService, Depends(get_report_service)],
) -> Response:
    await service.delete_report(report_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
