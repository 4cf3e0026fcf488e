"""Daily report service layer."""

from __future__ import annotations

from datetime import UTC, date, datetime
import logging

from operalog.adapters.db.base import DatastoreError
from operalog.core.logging_safety import safe_log_identifier
from operalog.domain.access import authorize_report_access
from operalog.errors import DuplicateReportError, NoFieldsToUpdateError, NotFoundError
from operalog.repositories.base import OperaLogRepository, ReportRecord
from operalog.schemas.auth import AuthContext
from operalog.schemas.common import Pagination
from operalog.schemas.report import (
    REPORT_VALUE_FIELDS,
    CreateReportRequest,
    DailyReport,
    ReportFilters,
    ReportPage,
    ReportStats,
    TopConsumer,
    UpdateReportRequest,
)

logger = logging.getLogger(__name__)


class ReportService:
    def __init__(self, repository: OperaLogRepository) -> None:
        self._repository = repository

    async def list_reports(self, filters: ReportFilters, *, page: int, limit: int) -> ReportPage:
        records, total = await self._repository.list_reports(filters, limit=limit, offset=(page - 1) * limit)
        return ReportPage(
            items=[self._to_report(record) for record in records],
            pagination=Pagination.build(page=page, limit=limit, total=total),
        )

    async def list_ship_reports(self, context: AuthContext, ship_id: int) -> list[DailyReport]:
        authorize_report_access(context, ship_id)
        return [self._to_report(record) for record in await self._repository.list_reports_for_ship(ship_id)]

    async def get_report(self, context: AuthContext, report_id: int) -> DailyReport:
        record = await self._repository.get_report(report_id)
        if record is None:
            raise NotFoundError("Report not found")

        authorize_report_access(context, record.ship_id)
        return self._to_report(record)

    async def create_report(self, context: AuthContext, payload: CreateReportRequest) -> DailyReport:
        authorize_report_access(context, payload.ship_id, message="You can only create your own reports")

        # Advisory; the (ship_id, report_date) unique constraint backs it under concurrent writers.
        if await self._repository.report_exists(payload.ship_id, payload.report_date):
            raise DuplicateReportError(payload.ship_id, payload.report_date)

        values = payload.model_dump(include=set(REPORT_VALUE_FIELDS))
        try:
            record = await self._repository.create_report(payload.ship_id, payload.report_date, values)
        except DatastoreError as exc:
            if exc.is_unique_violation:
                logger.warning(
                    "report.duplicate_race ship_id=%s report_date=%s",
                    safe_log_identifier(payload.ship_id, prefix="sid"),
                    payload.report_date.isoformat(),
                )
                raise DuplicateReportError(payload.ship_id, payload.report_date) from exc
            raise

        logger.info(
            "report.created report_id=%s ship_id=%s actor=%s",
            record.id,
            safe_log_identifier(record.ship_id, prefix="sid"),
            context.principal_type.value,
        )
        return self._to_report(record)

    async def update_report(self, context: AuthContext, report_id: int, payload: UpdateReportRequest) -> DailyReport:
        existing = await self._repository.get_report(report_id)
        if existing is None:
            raise NotFoundError("Report not found")

        authorize_report_access(context, existing.ship_id, message="You can only modify your own reports")

        changes = payload.model_dump(exclude_none=True)
        if not changes:
            raise NoFieldsToUpdateError()

        record = await self._repository.update_report(report_id, changes)
        if record is None:
            raise NotFoundError("Report not found")
        logger.info(
            "report.updated report_id=%s fields=%s actor=%s",
            report_id,
            ",".join(sorted(changes)),
            context.principal_type.value,
        )
        return self._to_report(record)

    async def delete_report(self, report_id: int) -> None:
        if not await self._repository.delete_report(report_id):
            raise NotFoundError("Report not found")
        logger.info("report.deleted report_id=%s", report_id)

    async def stats(self, *, today: date | None = None) -> ReportStats:
        record = await self._repository.report_stats(today=today or datetime.now(UTC).date())
        return ReportStats(
            total_reports=record.total_reports,
            ships_reporting=record.ships_reporting,
            avg_consumption=record.avg_consumption,
            weekly_consumption=record.weekly_consumption,
            weekly_reports=record.weekly_reports,
            top_consumers=[
                TopConsumer(name=item.name, type=item.type, total_consumption=item.total_consumption)
                for item in record.top_consumers
            ],
        )

    @staticmethod
    def _to_report(record: ReportRecord) -> DailyReport:
        return DailyReport(
            id=record.id,
            ship_id=record.ship_id,
            report_date=record.report_date,
            ship_name=record.ship_name,
            ship_type=record.ship_type,
            created_at=record.created_at,
            updated_at=record.updated_at,
            **record.values,
        )
