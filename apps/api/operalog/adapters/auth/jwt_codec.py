"""PyJWT-backed token codec."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from pydantic import ValidationError

from operalog.adapters.auth.base import ExpiredTokenError, InvalidTokenError, TokenCodec
from operalog.schemas.auth import TokenPayload

_RESERVED_CLAIMS = frozenset({"exp", "iat", "nbf"})


class JwtTokenCodec(TokenCodec):
    """HMAC-signed JWTs with an expiration set at issuance."""

    def __init__(
        self,
        secret: str,
        *,
        algorithm: str = "HS256",
        default_ttl: timedelta = timedelta(days=7),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._algorithm = algorithm
        self._default_ttl = default_ttl
        self._clock = clock or (lambda: datetime.now(UTC))

    def issue(self, payload: dict[str, Any], ttl: timedelta | None = None) -> str:
        issued_at = self._clock()
        claims = {key: value for key, value in payload.items() if key not in _RESERVED_CLAIMS}
        claims["iat"] = issued_at
        claims["exp"] = issued_at + (ttl if ttl is not None else self._default_ttl)
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError("Token has expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError("Invalid token") from exc

        try:
            return TokenPayload.model_validate(claims)
        except ValidationError as exc:
            raise InvalidTokenError("Token is missing identity claims") from exc


__all__ = ["JwtTokenCodec"]
