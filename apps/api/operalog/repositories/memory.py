"""In-memory repository used for local runs and tests."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from typing import Any

from operalog.adapters.db.base import UNIQUE_VIOLATION, DatastoreError
from operalog.core.passwords import hash_password
from operalog.repositories.base import (
    ConsumerTotal,
    OperaLogRepository,
    ReportRecord,
    ReportStatsRecord,
    ShipRecord,
    UserRecord,
)
from operalog.schemas.report import REPORT_VALUE_FIELDS, ReportFilters

_SHIP_COLUMNS = frozenset(
    {"name", "username", "password_hash", "type", "status", "captain", "small_name", "crew", "position"}
)


@dataclass(slots=True)
class InMemoryStore(OperaLogRepository):
    """Simple, deterministic persistence layer mirroring the SQL schema constraints."""

    users: dict[int, UserRecord] = field(default_factory=dict)
    ships: dict[int, ShipRecord] = field(default_factory=dict)
    reports: dict[int, ReportRecord] = field(default_factory=dict)
    read_count: int = 0
    ship_write_count: int = 0
    report_write_count: int = 0
    available: bool = True
    _next_user_id: int = 1
    _next_ship_id: int = 1
    _next_report_id: int = 1

    # Seeding helpers; users are provisioned out-of-band in production.

    def add_user(
        self,
        *,
        email: str,
        password: str,
        role: str = "admin",
        name: str | None = None,
        is_active: bool = True,
    ) -> UserRecord:
        user = UserRecord(
            id=self._next_user_id,
            email=email,
            name=name,
            role=role,
            is_active=is_active,
            password_hash=hash_password(password),
        )
        self._next_user_id += 1
        self.users[user.id] = user
        return user

    def add_ship(self, *, name: str, username: str, password: str = "ship-secret", **values: Any) -> ShipRecord:
        now = datetime.now(UTC)
        ship = ShipRecord(
            id=self._next_ship_id,
            name=name,
            username=username,
            password_hash=hash_password(password),
            created_at=now,
            updated_at=now,
            **values,
        )
        self._next_ship_id += 1
        self.ships[ship.id] = ship
        return ship

    def _read(self) -> None:
        if not self.available:
            raise DatastoreError("Database connection failed", connection_failed=True)
        self.read_count += 1

    def _with_ship(self, record: ReportRecord) -> ReportRecord:
        ship = self.ships.get(record.ship_id)
        return replace(
            record,
            values=dict(record.values),
            ship_name=ship.name if ship else None,
            ship_type=ship.type if ship else None,
        )

    async def ping(self) -> bool:
        return self.available

    async def get_user(self, user_id: int) -> UserRecord | None:
        self._read()
        return self.users.get(user_id)

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        self._read()
        return next((user for user in self.users.values() if user.email == email), None)

    async def get_ship(self, ship_id: int) -> ShipRecord | None:
        self._read()
        return self.ships.get(ship_id)

    async def get_ship_by_username(self, username: str) -> ShipRecord | None:
        self._read()
        return next((ship for ship in self.ships.values() if ship.username == username), None)

    async def touch_ship_login(self, ship_id: int) -> None:
        self._read()
        ship = self.ships.get(ship_id)
        if ship is not None:
            ship.last_login = datetime.now(UTC)

    async def list_ships(self, *, limit: int, offset: int) -> tuple[list[ShipRecord], int]:
        self._read()
        ships = sorted(self.ships.values(), key=lambda ship: (ship.created_at, ship.id), reverse=True)
        return ships[offset : offset + limit], len(ships)

    def _ensure_unique_ship(self, values: dict[str, Any], *, ship_id: int | None = None) -> None:
        for column in ("name", "username"):
            value = values.get(column)
            if value is None:
                continue
            for ship in self.ships.values():
                if getattr(ship, column) == value and ship.id != ship_id:
                    raise DatastoreError(
                        f'duplicate key value violates unique constraint "ships_{column}_key"',
                        sqlstate=UNIQUE_VIOLATION,
                    )

    async def create_ship(self, values: dict[str, Any]) -> ShipRecord:
        self._read()
        self._ensure_unique_ship(values)
        now = datetime.now(UTC)
        ship = ShipRecord(
            id=self._next_ship_id,
            created_at=now,
            updated_at=now,
            **{key: value for key, value in values.items() if key in _SHIP_COLUMNS},
        )
        self._next_ship_id += 1
        self.ships[ship.id] = ship
        self.ship_write_count += 1
        return ship

    async def update_ship(self, ship_id: int, changes: dict[str, Any]) -> ShipRecord | None:
        self._read()
        ship = self.ships.get(ship_id)
        if ship is None:
            return None
        self._ensure_unique_ship(changes, ship_id=ship_id)
        for column, value in changes.items():
            if value is not None and column in _SHIP_COLUMNS:
                setattr(ship, column, value)
        ship.updated_at = datetime.now(UTC)
        self.ship_write_count += 1
        return ship

    async def delete_ship(self, ship_id: int) -> bool:
        self._read()
        if self.ships.pop(ship_id, None) is None:
            return False
        # ON DELETE CASCADE
        for report_id in [rid for rid, report in self.reports.items() if report.ship_id == ship_id]:
            del self.reports[report_id]
        self.ship_write_count += 1
        return True

    async def list_reports(
        self,
        filters: ReportFilters,
        *,
        limit: int,
        offset: int,
    ) -> tuple[list[ReportRecord], int]:
        self._read()
        matches = [
            report
            for report in self.reports.values()
            if report.ship_id in self.ships
            and (filters.ship_id is None or report.ship_id == filters.ship_id)
            and (filters.start_date is None or report.report_date >= filters.start_date)
            and (filters.end_date is None or report.report_date <= filters.end_date)
        ]
        matches.sort(key=lambda report: (report.report_date, report.updated_at), reverse=True)
        return [self._with_ship(report) for report in matches[offset : offset + limit]], len(matches)

    async def list_reports_for_ship(self, ship_id: int) -> list[ReportRecord]:
        self._read()
        matches = [report for report in self.reports.values() if report.ship_id == ship_id]
        matches.sort(key=lambda report: (report.report_date, report.updated_at), reverse=True)
        return [self._with_ship(report) for report in matches]

    async def get_report(self, report_id: int) -> ReportRecord | None:
        self._read()
        report = self.reports.get(report_id)
        if report is None or report.ship_id not in self.ships:
            return None
        return self._with_ship(report)

    async def report_exists(self, ship_id: int, report_date: date) -> bool:
        self._read()
        return any(
            report.ship_id == ship_id and report.report_date == report_date for report in self.reports.values()
        )

    async def create_report(self, ship_id: int, report_date: date, values: dict[str, Any]) -> ReportRecord:
        self._read()
        if ship_id not in self.ships:
            raise DatastoreError(
                'insert or update on table "daily_reports" violates foreign key constraint',
                sqlstate="23503",
            )
        for report in self.reports.values():
            if report.ship_id == ship_id and report.report_date == report_date:
                raise DatastoreError(
                    'duplicate key value violates unique constraint "daily_reports_ship_id_report_date_key"',
                    sqlstate=UNIQUE_VIOLATION,
                )

        now = datetime.now(UTC)
        record = ReportRecord(
            id=self._next_report_id,
            ship_id=ship_id,
            report_date=report_date,
            values={name: values.get(name) for name in REPORT_VALUE_FIELDS},
            created_at=now,
            updated_at=now,
        )
        self._next_report_id += 1
        self.reports[record.id] = record
        self.report_write_count += 1
        return self._with_ship(record)

    async def update_report(self, report_id: int, changes: dict[str, Any]) -> ReportRecord | None:
        self._read()
        record = self.reports.get(report_id)
        if record is None:
            return None
        for name, value in changes.items():
            if value is not None and name in REPORT_VALUE_FIELDS:
                record.values[name] = value
        record.updated_at = datetime.now(UTC)
        self.report_write_count += 1
        return self._with_ship(record)

    async def delete_report(self, report_id: int) -> bool:
        self._read()
        if self.reports.pop(report_id, None) is None:
            return False
        self.report_write_count += 1
        return True

    async def report_stats(self, *, today: date) -> ReportStatsRecord:
        self._read()
        reports = list(self.reports.values())
        consumed = [r.values["fuel_oil_consumed"] for r in reports if r.values.get("fuel_oil_consumed") is not None]
        weekly = [r for r in reports if r.report_date >= today - timedelta(days=7)]

        totals: dict[int, float] = {}
        for report in reports:
            if report.report_date < today - timedelta(days=30) or report.ship_id not in self.ships:
                continue
            value = report.values.get("fuel_oil_consumed")
            if value is not None:
                totals[report.ship_id] = totals.get(report.ship_id, 0.0) + float(value)
        top = sorted(totals.items(), key=lambda item: item[1], reverse=True)[:5]

        return ReportStatsRecord(
            total_reports=len(reports),
            ships_reporting=len({r.ship_id for r in reports}),
            avg_consumption=sum(consumed) / len(consumed) if consumed else 0.0,
            weekly_consumption=float(
                sum(r.values["fuel_oil_consumed"] for r in weekly if r.values.get("fuel_oil_consumed") is not None)
            ),
            weekly_reports=len(weekly),
            top_consumers=[
                ConsumerTotal(name=self.ships[ship_id].name, type=self.ships[ship_id].type, total_consumption=total)
                for ship_id, total in top
            ],
        )


__all__ = ["InMemoryStore"]
