"""Daily report API schemas."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from operalog.schemas.common import Pagination


class ReportValues(BaseModel):
    """Numeric, free-text and structured fields of a daily report."""

    crew: int | None = None
    visitors: int | None = None
    sailing_eco: float | None = None
    sailing_full: float | None = None
    cargo_ops: float | None = None
    lifting_ops: float | None = None
    standby_offshore: float | None = None
    standby_port: float | None = None
    standby_anchorage: float | None = None
    downtime: float | None = None
    distance: float | None = None
    operations: list[dict[str, Any]] | None = None
    tanks: list[dict[str, Any]] | None = None
    silos: list[dict[str, Any]] | None = None
    fuel_transfers: list[dict[str, Any]] | None = None
    fuel_oil_rob: float | None = None
    fuel_oil_received: float | None = None
    fuel_oil_consumed: float | None = None
    fuel_oil_delivered: float | None = None
    lub_oil_rob: float | None = None
    lub_oil_received: float | None = None
    lub_oil_consumed: float | None = None
    lub_oil_delivered: float | None = None
    fresh_water_rob: float | None = None
    fresh_water_received: float | None = None
    fresh_water_consumed: float | None = None
    fresh_water_delivered: float | None = None
    remarks: str | None = None
    prepared_by: str | None = None
    vessel_name: str | None = None


REPORT_VALUE_FIELDS: tuple[str, ...] = tuple(ReportValues.model_fields)


class CreateReportRequest(ReportValues):
    ship_id: int = Field(ge=1)
    report_date: date
    operations: list[dict[str, Any]]
    tanks: list[dict[str, Any]]
    silos: list[dict[str, Any]]


class UpdateReportRequest(ReportValues):
    """Partial report update; ``ship_id`` and ``report_date`` are fixed."""


class DailyReport(ReportValues):
    id: int
    ship_id: int
    report_date: date
    ship_name: str | None = None
    ship_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReportPage(BaseModel):
    items: list[DailyReport]
    pagination: Pagination


class TopConsumer(BaseModel):
    name: str
    type: str | None = None
    total_consumption: float


class ReportStats(BaseModel):
    total_reports: int
    ships_reporting: int
    avg_consumption: float
    weekly_consumption: float
    weekly_reports: int
    top_consumers: list[TopConsumer]


@dataclass(frozen=True, slots=True)
class ReportFilters:
    """Optional listing filters; ``None`` means the filter is absent."""

    ship_id: int | None = None
    start_date: date | None = None
    end_date: date | None = None
