"""Ship service layer."""

from __future__ import annotations

import logging

from operalog.core.logging_safety import safe_log_identifier
from operalog.core.passwords import hash_password
from operalog.errors import NoFieldsToUpdateError, NotFoundError
from operalog.repositories.base import OperaLogRepository, ShipRecord
from operalog.schemas.auth import ShipProfile
from operalog.schemas.common import Pagination
from operalog.schemas.ship import CreateShipRequest, Ship, ShipPage, UpdateShipRequest

logger = logging.getLogger(__name__)


class ShipService:
    def __init__(self, repository: OperaLogRepository) -> None:
        self._repository = repository

    async def list_ships(self, *, page: int, limit: int) -> ShipPage:
        records, total = await self._repository.list_ships(limit=limit, offset=(page - 1) * limit)
        return ShipPage(
            items=[self._to_ship(record) for record in records],
            pagination=Pagination.build(page=page, limit=limit, total=total),
        )

    async def get_ship(self, ship_id: int) -> Ship:
        record = await self._repository.get_ship(ship_id)
        if record is None:
            raise NotFoundError("Ship not found")
        return self._to_ship(record)

    async def get_profile(self, ship_id: int) -> ShipProfile:
        record = await self._repository.get_ship(ship_id)
        if record is None:
            raise NotFoundError("Ship not found")
        return ShipProfile(
            id=record.id,
            name=record.name,
            type=record.type,
            status=record.status,
            captain=record.captain,
            username=record.username,
            small_name=record.small_name,
            crew=record.crew,
            position=record.position,
        )

    async def create_ship(self, payload: CreateShipRequest) -> Ship:
        values = payload.model_dump(exclude={"password"})
        values["password_hash"] = hash_password(payload.password)
        record = await self._repository.create_ship(values)
        logger.info("ship.created ship_id=%s", safe_log_identifier(record.id, prefix="sid"))
        return self._to_ship(record)

    async def update_ship(self, ship_id: int, payload: UpdateShipRequest) -> Ship:
        if await self._repository.get_ship(ship_id) is None:
            raise NotFoundError("Ship not found")

        changes = payload.model_dump(exclude_none=True, exclude={"password"})
        if payload.password is not None:
            changes["password_hash"] = hash_password(payload.password)
        if not changes:
            raise NoFieldsToUpdateError()

        record = await self._repository.update_ship(ship_id, changes)
        if record is None:
            raise NotFoundError("Ship not found")
        logger.info(
            "ship.updated ship_id=%s fields=%s",
            safe_log_identifier(ship_id, prefix="sid"),
            ",".join(sorted(changes)),
        )
        return self._to_ship(record)

    async def delete_ship(self, ship_id: int) -> None:
        if not await self._repository.delete_ship(ship_id):
            raise NotFoundError("Ship not found")
        logger.info("ship.deleted ship_id=%s", safe_log_identifier(ship_id, prefix="sid"))

    @staticmethod
    def _to_ship(record: ShipRecord) -> Ship:
        return Ship(
            id=record.id,
            name=record.name,
            type=record.type,
            status=record.status,
            captain=record.captain,
            username=record.username,
            small_name=record.small_name,
            crew=record.crew,
            position=record.position,
            last_login=record.last_login,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
