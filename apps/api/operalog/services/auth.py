"""Login and current-principal service."""

from __future__ import annotations

import logging

from operalog.adapters.auth.base import TokenCodec
from operalog.core.logging_safety import safe_log_identifier
from operalog.core.passwords import verify_password
from operalog.errors import InvalidCredentialsError
from operalog.repositories.base import OperaLogRepository
from operalog.schemas.auth import (
    AdminLoginResponse,
    AuthContext,
    CurrentPrincipalResponse,
    PrincipalType,
    ShipLoginResponse,
    ShipProfile,
    UserPrincipal,
)

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, repository: OperaLogRepository, codec: TokenCodec) -> None:
        self._repository = repository
        self._codec = codec

    async def login_admin(self, *, email: str, password: str) -> AdminLoginResponse:
        user = await self._repository.get_user_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            logger.warning(
                "auth.login_rejected principal_type=user email=%s",
                safe_log_identifier(email, prefix="em"),
            )
            raise InvalidCredentialsError()

        token = self._codec.issue(
            {"id": user.id, "email": user.email, "role": user.role, "type": PrincipalType.USER.value}
        )
        logger.info("auth.login principal_type=user principal_id=%s", safe_log_identifier(user.id, prefix="pid"))
        return AdminLoginResponse(
            user=UserPrincipal(
                id=user.id,
                email=user.email,
                name=user.name,
                role=user.role,
                is_active=user.is_active,
            ),
            token=token,
        )

    async def login_ship(self, *, username: str, password: str) -> ShipLoginResponse:
        ship = await self._repository.get_ship_by_username(username)
        if ship is None or not verify_password(password, ship.password_hash):
            logger.warning(
                "auth.login_rejected principal_type=ship username=%s",
                safe_log_identifier(username, prefix="un"),
            )
            raise InvalidCredentialsError()

        await self._repository.touch_ship_login(ship.id)
        token = self._codec.issue(
            {"id": ship.id, "username": ship.username, "name": ship.name, "type": PrincipalType.SHIP.value}
        )
        logger.info("auth.login principal_type=ship principal_id=%s", safe_log_identifier(ship.id, prefix="pid"))
        return ShipLoginResponse(
            ship=ShipProfile(
                id=ship.id,
                name=ship.name,
                type=ship.type,
                status=ship.status,
                captain=ship.captain,
                username=ship.username,
                small_name=ship.small_name,
                crew=ship.crew,
                position=ship.position,
            ),
            token=token,
        )

    @staticmethod
    def describe(context: AuthContext) -> CurrentPrincipalResponse:
        if context.is_ship:
            return CurrentPrincipalResponse(type="ship", ship=context.ship)
        return CurrentPrincipalResponse(type="admin", user=context.user)
