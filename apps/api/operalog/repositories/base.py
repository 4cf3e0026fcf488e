"""Repository contract and record types."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from operalog.schemas.report import ReportFilters


@dataclass(slots=True)
class UserRecord:
    id: int
    email: str
    name: str | None
    role: str
    is_active: bool
    password_hash: str | None = None


@dataclass(slots=True)
class ShipRecord:
    id: int
    name: str
    username: str
    password_hash: str | None = None
    type: str | None = None
    status: str | None = None
    captain: str | None = None
    small_name: str | None = None
    crew: int | None = None
    position: str | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ReportRecord:
    id: int
    ship_id: int
    report_date: date
    values: dict[str, Any] = field(default_factory=dict)
    ship_name: str | None = None
    ship_type: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(slots=True)
class ConsumerTotal:
    name: str
    type: str | None
    total_consumption: float


@dataclass(slots=True)
class ReportStatsRecord:
    total_reports: int
    ships_reporting: int
    avg_consumption: float
    weekly_consumption: float
    weekly_reports: int
    top_consumers: list[ConsumerTotal]


class OperaLogRepository(ABC):
    """Storage operations used by the services. Every call is one round trip."""

    @abstractmethod
    async def ping(self) -> bool: ...

    @abstractmethod
    async def get_user(self, user_id: int) -> UserRecord | None: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> UserRecord | None: ...

    @abstractmethod
    async def get_ship(self, ship_id: int) -> ShipRecord | None: ...

    @abstractmethod
    async def get_ship_by_username(self, username: str) -> ShipRecord | None: ...

    @abstractmethod
    async def touch_ship_login(self, ship_id: int) -> None: ...

    @abstractmethod
    async def list_ships(self, *, limit: int, offset: int) -> tuple[list[ShipRecord], int]: ...

    @abstractmethod
    async def create_ship(self, values: dict[str, Any]) -> ShipRecord: ...

    @abstractmethod
    async def update_ship(self, ship_id: int, changes: dict[str, Any]) -> ShipRecord | None: ...

    @abstractmethod
    async def delete_ship(self, ship_id: int) -> bool: ...

    @abstractmethod
    async def list_reports(
        self,
        filters: ReportFilters,
        *,
        limit: int,
        offset: int,
    ) -> tuple[list[ReportRecord], int]: ...

    @abstractmethod
    async def list_reports_for_ship(self, ship_id: int) -> list[ReportRecord]: ...

    @abstractmethod
    async def get_report(self, report_id: int) -> ReportRecord | None: ...

    @abstractmethod
    async def report_exists(self, ship_id: int, report_date: date) -> bool: ...

    @abstractmethod
    async def create_report(self, ship_id: int, report_date: date, values: dict[str, Any]) -> ReportRecord: ...

    @abstractmethod
    async def update_report(self, report_id: int, changes: dict[str, Any]) -> ReportRecord | None: ...

    @abstractmethod
    async def delete_report(self, report_id: int) -> bool: ...

    @abstractmethod
    async def report_stats(self, *, today: date) -> ReportStatsRecord: ...


__all__ = [
    "ConsumerTotal",
    "OperaLogRepository",
    "ReportRecord",
    "ReportStatsRecord",
    "ShipRecord",
    "UserRecord",
]
