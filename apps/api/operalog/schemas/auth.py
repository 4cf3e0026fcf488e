"""Authentication schemas."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PrincipalType(str, Enum):
    USER = "user"
    SHIP = "ship"


class TokenPayload(BaseModel):
    """Claims carried by a bearer token.

    ``type`` is kept as a raw string so an unknown discriminant can be
    rejected by the authentication gate rather than by claim parsing.
    """

    id: int
    type: str = Field(min_length=1)
    role: str | None = None
    email: str | None = None
    username: str | None = None
    name: str | None = None


class UserPrincipal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    email: str
    name: str | None = None
    role: str
    is_active: bool


class ShipPrincipal(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    type: str | None = None
    status: str | None = None
    captain: str | None = None
    username: str


class AuthContext(BaseModel):
    """Resolved identity for one request; holds exactly one principal."""

    model_config = ConfigDict(frozen=True)

    principal_type: PrincipalType
    user: UserPrincipal | None = None
    ship: ShipPrincipal | None = None

    @model_validator(mode="after")
    def _exactly_one_principal(self) -> AuthContext:
        if self.principal_type is PrincipalType.USER and (self.user is None or self.ship is not None):
            raise ValueError("user context must carry only a user principal")
        if self.principal_type is PrincipalType.SHIP and (self.ship is None or self.user is not None):
            raise ValueError("ship context must carry only a ship principal")
        return self

    @classmethod
    def for_user(cls, user: UserPrincipal) -> AuthContext:
        return cls(principal_type=PrincipalType.USER, user=user)

    @classmethod
    def for_ship(cls, ship: ShipPrincipal) -> AuthContext:
        return cls(principal_type=PrincipalType.SHIP, ship=ship)

    @property
    def is_ship(self) -> bool:
        return self.principal_type is PrincipalType.SHIP

    @property
    def principal_id(self) -> int:
        principal = self.user if self.user is not None else self.ship
        return principal.id


class AdminLoginRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)


class ShipLoginRequest(BaseModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)


class ShipProfile(ShipPrincipal):
    small_name: str | None = None
    crew: int | None = None
    position: str | None = None


class AdminLoginResponse(BaseModel):
    user: UserPrincipal
    token: str
    type: str = "admin"


class ShipLoginResponse(BaseModel):
    ship: ShipProfile
    token: str
    type: str = "ship"


class CurrentPrincipalResponse(BaseModel):
    type: str
    user: UserPrincipal | None = None
    ship: ShipPrincipal | None = None


class LogoutResponse(BaseModel):
    message: str = "Logged out"
