"""Authentication gate: bearer token to request context."""

from __future__ import annotations

from enum import Enum

from operalog.adapters.auth.base import ExpiredTokenError, TokenCodec, TokenVerificationError
from operalog.schemas.auth import AuthContext, PrincipalType
from operalog.services.principals import PrincipalResolutionError, PrincipalResolver


class AuthKind(str, Enum):
    USER = "user"
    SHIP = "ship"
    EITHER = "either"


class AuthFailure(str, Enum):
    MISSING_TOKEN = "missing_token"
    INVALID_TOKEN = "invalid_token"
    EXPIRED_TOKEN = "expired_token"
    WRONG_PRINCIPAL_TYPE = "wrong_principal_type"
    PRINCIPAL_INVALID = "principal_invalid"


_FAILURE_MESSAGES: dict[AuthFailure, str] = {
    AuthFailure.MISSING_TOKEN: "Missing authentication token",
    AuthFailure.INVALID_TOKEN: "Invalid token",
    AuthFailure.EXPIRED_TOKEN: "Invalid token",
    AuthFailure.WRONG_PRINCIPAL_TYPE: "Invalid token type",
}


class AuthenticationError(Exception):
    """Rejected credential.

    ``failure`` and ``detail`` are for internal logging; ``str(exc)`` is the
    message safe to return to the caller.
    """

    def __init__(self, failure: AuthFailure, message: str | None = None, *, detail: str | None = None) -> None:
        self.failure = failure
        self.detail = detail
        super().__init__(message or _FAILURE_MESSAGES.get(failure, "Authentication required"))


class AuthenticationGate:
    def __init__(self, codec: TokenCodec, resolver: PrincipalResolver) -> None:
        self._codec = codec
        self._resolver = resolver

    async def authenticate(self, kind: AuthKind, token: str | None) -> AuthContext:
        if not token:
            raise AuthenticationError(AuthFailure.MISSING_TOKEN)

        try:
            payload = self._codec.verify(token)
        except ExpiredTokenError as exc:
            raise AuthenticationError(AuthFailure.EXPIRED_TOKEN) from exc
        except TokenVerificationError as exc:
            raise AuthenticationError(AuthFailure.INVALID_TOKEN, detail=str(exc)) from exc

        try:
            principal_type = PrincipalType(payload.type)
        except ValueError as exc:
            raise AuthenticationError(AuthFailure.WRONG_PRINCIPAL_TYPE, detail=payload.type) from exc

        if kind is not AuthKind.EITHER and principal_type.value != kind.value:
            raise AuthenticationError(AuthFailure.WRONG_PRINCIPAL_TYPE, detail=payload.type)

        try:
            if principal_type is PrincipalType.USER:
                return AuthContext.for_user(await self._resolver.resolve_user(payload.id))
            return AuthContext.for_ship(await self._resolver.resolve_ship(payload.id))
        except PrincipalResolutionError as exc:
            raise AuthenticationError(AuthFailure.PRINCIPAL_INVALID, str(exc), detail=exc.reason) from exc

    async def require_user(self, token: str | None) -> AuthContext:
        return await self.authenticate(AuthKind.USER, token)

    async def require_ship(self, token: str | None) -> AuthContext:
        return await self.authenticate(AuthKind.SHIP, token)

    async def require_either(self, token: str | None) -> AuthContext:
        return await self.authenticate(AuthKind.EITHER, token)
