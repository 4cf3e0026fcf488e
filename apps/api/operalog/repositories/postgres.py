"""PostgreSQL repository rendering parameterized SQL over a ``Datastore``."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from operalog.adapters.db.base import Datastore
from operalog.domain.query_builder import build_report_filter_clause, build_update_clause
from operalog.repositories.base import (
    ConsumerTotal,
    OperaLogRepository,
    ReportRecord,
    ReportStatsRecord,
    ShipRecord,
    UserRecord,
)
from operalog.schemas.report import REPORT_VALUE_FIELDS, ReportFilters

_USER_COLUMNS = "id, email, name, role, is_active"
_SHIP_COLUMNS = (
    "id, name, username, type, status, captain, small_name, crew, position, last_login, created_at, updated_at"
)
_SHIP_INSERT_COLUMNS = (
    "name",
    "type",
    "captain",
    "username",
    "password_hash",
    "status",
    "small_name",
    "crew",
    "position",
)
_SHIP_UPDATE_COLUMNS = frozenset(_SHIP_INSERT_COLUMNS)
_REPORT_FROM = "FROM daily_reports dr JOIN ships s ON dr.ship_id = s.id"
_REPORT_ORDER = "ORDER BY dr.report_date DESC, dr.updated_at DESC"


def _user_from_row(row: dict[str, Any]) -> UserRecord:
    return UserRecord(
        id=row["id"],
        email=row["email"],
        name=row.get("name"),
        role=row["role"],
        is_active=bool(row["is_active"]),
        password_hash=row.get("password_hash"),
    )


def _ship_from_row(row: dict[str, Any]) -> ShipRecord:
    return ShipRecord(
        id=row["id"],
        name=row["name"],
        username=row["username"],
        password_hash=row.get("password_hash"),
        type=row.get("type"),
        status=row.get("status"),
        captain=row.get("captain"),
        small_name=row.get("small_name"),
        crew=row.get("crew"),
        position=row.get("position"),
        last_login=row.get("last_login"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _report_from_row(row: dict[str, Any]) -> ReportRecord:
    return ReportRecord(
        id=row["id"],
        ship_id=row["ship_id"],
        report_date=row["report_date"],
        values={name: row.get(name) for name in REPORT_VALUE_FIELDS},
        ship_name=row.get("ship_name"),
        ship_type=row.get("ship_type"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class PostgresRepository(OperaLogRepository):
    def __init__(self, datastore: Datastore) -> None:
        self._datastore = datastore

    async def _fetch_one(self, query: str, params: list[Any]) -> dict[str, Any] | None:
        rows = await self._datastore.fetch(query, params)
        return rows[0] if rows else None

    async def ping(self) -> bool:
        return await self._datastore.ping()

    async def get_user(self, user_id: int) -> UserRecord | None:
        row = await self._fetch_one(f"SELECT {_USER_COLUMNS} FROM users WHERE id = $1", [user_id])
        return _user_from_row(row) if row else None

    async def get_user_by_email(self, email: str) -> UserRecord | None:
        row = await self._fetch_one(
            f"SELECT {_USER_COLUMNS}, password_hash FROM users WHERE email = $1",
            [email],
        )
        return _user_from_row(row) if row else None

    async def get_ship(self, ship_id: int) -> ShipRecord | None:
        row = await self._fetch_one(f"SELECT {_SHIP_COLUMNS} FROM ships WHERE id = $1", [ship_id])
        return _ship_from_row(row) if row else None

    async def get_ship_by_username(self, username: str) -> ShipRecord | None:
        row = await self._fetch_one(
            f"SELECT {_SHIP_COLUMNS}, password_hash FROM ships WHERE username = $1",
            [username],
        )
        return _ship_from_row(row) if row else None

    async def touch_ship_login(self, ship_id: int) -> None:
        await self._datastore.fetch("UPDATE ships SET last_login = CURRENT_TIMESTAMP WHERE id = $1", [ship_id])

    async def list_ships(self, *, limit: int, offset: int) -> tuple[list[ShipRecord], int]:
        rows = await self._datastore.fetch(
            f"SELECT {_SHIP_COLUMNS} FROM ships ORDER BY created_at DESC LIMIT $1 OFFSET $2",
            [limit, offset],
        )
        count = await self._fetch_one("SELECT COUNT(*) AS total FROM ships", [])
        return [_ship_from_row(row) for row in rows], int(count["total"]) if count else 0

    async def create_ship(self, values: dict[str, Any]) -> ShipRecord:
        placeholders = ", ".join(f"${index}" for index in range(1, len(_SHIP_INSERT_COLUMNS) + 1))
        row = await self._fetch_one(
            f"INSERT INTO ships ({', '.join(_SHIP_INSERT_COLUMNS)}) VALUES ({placeholders}) "
            f"RETURNING {_SHIP_COLUMNS}",
            [values.get(column) for column in _SHIP_INSERT_COLUMNS],
        )
        return _ship_from_row(row)

    async def update_ship(self, ship_id: int, changes: dict[str, Any]) -> ShipRecord | None:
        clause = build_update_clause(
            {column: value for column, value in changes.items() if column in _SHIP_UPDATE_COLUMNS},
            leading_params=[ship_id],
        )
        row = await self._fetch_one(
            f"UPDATE ships SET {clause.text} WHERE id = $1 RETURNING {_SHIP_COLUMNS}",
            clause.params,
        )
        return _ship_from_row(row) if row else None

    async def delete_ship(self, ship_id: int) -> bool:
        row = await self._fetch_one("DELETE FROM ships WHERE id = $1 RETURNING id", [ship_id])
        return row is not None

    async def list_reports(
        self,
        filters: ReportFilters,
        *,
        limit: int,
        offset: int,
    ) -> tuple[list[ReportRecord], int]:
        page_clause = build_report_filter_clause(filters, limit=limit, offset=offset)
        rows = await self._datastore.fetch(
            f"SELECT dr.*, s.name AS ship_name, s.type AS ship_type {_REPORT_FROM} "
            f"{page_clause.text} {_REPORT_ORDER} LIMIT $1 OFFSET $2",
            page_clause.params,
        )
        count_clause = build_report_filter_clause(filters)
        count = await self._fetch_one(
            f"SELECT COUNT(*) AS total {_REPORT_FROM} {count_clause.text}",
            count_clause.params,
        )
        return [_report_from_row(row) for row in rows], int(count["total"]) if count else 0

    async def list_reports_for_ship(self, ship_id: int) -> list[ReportRecord]:
        rows = await self._datastore.fetch(
            f"SELECT dr.*, s.name AS ship_name, s.type AS ship_type {_REPORT_FROM} "
            f"WHERE dr.ship_id = $1 {_REPORT_ORDER}",
            [ship_id],
        )
        return [_report_from_row(row) for row in rows]

    async def get_report(self, report_id: int) -> ReportRecord | None:
        row = await self._fetch_one(
            f"SELECT dr.*, s.name AS ship_name, s.type AS ship_type {_REPORT_FROM} WHERE dr.id = $1",
            [report_id],
        )
        return _report_from_row(row) if row else None

    async def report_exists(self, ship_id: int, report_date: date) -> bool:
        row = await self._fetch_one(
            "SELECT id FROM daily_reports WHERE ship_id = $1 AND report_date = $2",
            [ship_id, report_date],
        )
        return row is not None

    async def create_report(self, ship_id: int, report_date: date, values: dict[str, Any]) -> ReportRecord:
        columns = ("ship_id", "report_date", *REPORT_VALUE_FIELDS)
        params = [ship_id, report_date, *(values.get(name) for name in REPORT_VALUE_FIELDS)]
        placeholders = ", ".join(f"${index}" for index in range(1, len(columns) + 1))
        row = await self._fetch_one(
            f"INSERT INTO daily_reports ({', '.join(columns)}) VALUES ({placeholders}) RETURNING *",
            params,
        )
        return _report_from_row(row)

    async def update_report(self, report_id: int, changes: dict[str, Any]) -> ReportRecord | None:
        clause = build_update_clause(
            {name: value for name, value in changes.items() if name in REPORT_VALUE_FIELDS},
            leading_params=[report_id],
        )
        row = await self._fetch_one(
            f"UPDATE daily_reports SET {clause.text} WHERE id = $1 RETURNING *",
            clause.params,
        )
        return _report_from_row(row) if row else None

    async def delete_report(self, report_id: int) -> bool:
        row = await self._fetch_one("DELETE FROM daily_reports WHERE id = $1 RETURNING id", [report_id])
        return row is not None

    async def report_stats(self, *, today: date) -> ReportStatsRecord:
        totals = await self._fetch_one(
            "SELECT COUNT(*) AS total_reports, COUNT(DISTINCT ship_id) AS ships_reporting, "
            "AVG(fuel_oil_consumed) AS avg_consumption FROM daily_reports",
            [],
        )
        weekly = await self._fetch_one(
            "SELECT SUM(fuel_oil_consumed) AS weekly_consumption, COUNT(*) AS weekly_reports "
            "FROM daily_reports WHERE report_date >= $1",
            [today - timedelta(days=7)],
        )
        top_rows = await self._datastore.fetch(
            "SELECT s.name, s.type, SUM(dr.fuel_oil_consumed) AS total_consumption "
            f"{_REPORT_FROM} WHERE dr.report_date >= $1 AND dr.fuel_oil_consumed IS NOT NULL "
            "GROUP BY s.id, s.name, s.type ORDER BY total_consumption DESC LIMIT 5",
            [today - timedelta(days=30)],
        )
        totals = totals or {}
        weekly = weekly or {}
        return ReportStatsRecord(
            total_reports=int(totals.get("total_reports") or 0),
            ships_reporting=int(totals.get("ships_reporting") or 0),
            avg_consumption=float(totals.get("avg_consumption") or 0),
            weekly_consumption=float(weekly.get("weekly_consumption") or 0),
            weekly_reports=int(weekly.get("weekly_reports") or 0),
            top_consumers=[
                ConsumerTotal(
                    name=row["name"],
                    type=row.get("type"),
                    total_consumption=float(row["total_consumption"] or 0),
                )
                for row in top_rows
            ],
        )


__all__ = ["PostgresRepository"]
