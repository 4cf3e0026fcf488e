"""Live principal lookup for verified tokens."""

from __future__ import annotations

from operalog.repositories.base import OperaLogRepository
from operalog.schemas.auth import ShipPrincipal, UserPrincipal


class PrincipalResolutionError(Exception):
    """The token references a principal that is no longer valid.

    ``reason`` is ``"not_found"`` or ``"inactive"`` and is meant for logs
    only; callers expose the uniform message.
    """

    def __init__(self, message: str, *, reason: str) -> None:
        self.reason = reason
        super().__init__(message)


USER_INVALID_MESSAGE = "User not found or inactive"
SHIP_INVALID_MESSAGE = "Ship not found"


class PrincipalResolver:
    """Loads the current user or ship record on every call, without caching."""

    def __init__(self, repository: OperaLogRepository) -> None:
        self._repository = repository

    async def resolve_user(self, user_id: int) -> UserPrincipal:
        record = await self._repository.get_user(user_id)
        if record is None:
            raise PrincipalResolutionError(USER_INVALID_MESSAGE, reason="not_found")
        if not record.is_active:
            raise PrincipalResolutionError(USER_INVALID_MESSAGE, reason="inactive")

        return UserPrincipal(
            id=record.id,
            email=record.email,
            name=record.name,
            role=record.role,
            is_active=record.is_active,
        )

    async def resolve_ship(self, ship_id: int) -> ShipPrincipal:
        record = await self._repository.get_ship(ship_id)
        if record is None:
            raise PrincipalResolutionError(SHIP_INVALID_MESSAGE, reason="not_found")

        return ShipPrincipal(
            id=record.id,
            name=record.name,
            type=record.type,
            status=record.status,
            captain=record.captain,
            username=record.username,
        )
