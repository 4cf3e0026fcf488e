"""Ship API schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from operalog.schemas.common import Pagination


class CreateShipRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    type: str | None = None
    captain: str = Field(min_length=1)
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    status: str | None = None
    small_name: str | None = None
    crew: int | None = Field(default=None, ge=0)
    position: str | None = None


class UpdateShipRequest(BaseModel):
    """Partial ship update; omitted or null fields are left untouched."""

    name: str | None = Field(default=None, min_length=2, max_length=100)
    password: str | None = Field(default=None, min_length=6)
    type: str | None = None
    status: str | None = None
    captain: str | None = Field(default=None, min_length=1)
    username: str | None = Field(default=None, min_length=3, max_length=50)
    crew: int | None = Field(default=None, ge=0)
    small_name: str | None = None
    position: str | None = None


class Ship(BaseModel):
    id: int
    name: str
    type: str | None = None
    status: str | None = None
    captain: str | None = None
    username: str
    small_name: str | None = None
    crew: int | None = None
    position: str | None = None
    last_login: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ShipPage(BaseModel):
    items: list[Ship]
    pagination: Pagination
