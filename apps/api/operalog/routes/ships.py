"""Ship routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from operalog.routes.dependencies import get_ship_context, get_ship_service, get_user_context, require_role
from operalog.schemas.auth import AuthContext, ShipProfile
from operalog.schemas.error import ErrorResponse
from operalog.schemas.ship import CreateShipRequest, Ship, ShipPage, UpdateShipRequest
from operalog.services.ships import ShipService

router = APIRouter(prefix="/ships", tags=["Ships"])


@router.get("", response_model=ShipPage, responses={401: {"model": ErrorResponse}})
async def list_ships(
    _: Annotated[AuthContext, Depends(get_user_context)],
    service: Annotated[ShipService, Depends(get_ship_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
) -> ShipPage:
    return await service.list_ships(page=page, limit=limit)


@router.get("/me/profile", response_model=ShipProfile, responses={401: {"model": ErrorResponse}})
async def get_own_profile(
    context: Annotated[AuthContext, Depends(get_ship_context)],
    service: Annotated[ShipService, Depends(get_ship_service)],
) -> ShipProfile:
    return await service.get_profile(context.ship.id)


@router.get(
    "/{shipId}",
    response_model=Ship,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_ship(
    ship_id: Annotated[int, Path(alias="shipId")],
    _: Annotated[AuthContext, Depends(get_user_context)],
    service: Annotated[ShipService, Depends(get_ship_service)],
) -> Ship:
    return await service.get_ship(ship_id)


@router.post(
    "",
    response_model=Ship,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
async def create_ship(
    payload: CreateShipRequest,
    _: Annotated[AuthContext, Depends(require_role("admin"))],
    service: Annotated[ShipService, Depends(get_ship_service)],
) -> Ship:
    return await service.create_ship(payload)


@router.put(
    "/{shipId}",
    response_model=Ship,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_ship(
    ship_id: Annotated[int, Path(alias="shipId")],
    payload: UpdateShipRequest,
    _: Annotated[AuthContext, Depends(require_role("admin", "supervisor"))],
    service: Annotated[ShipService, Depends(get_ship_service)],
) -> Ship:
    return await service.update_ship(ship_id, payload)


@router.delete(
    "/{shipId}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_ship(
    ship_id: Annotated[int, Path(alias="shipId")],
    _: Annotated[AuthContext, Depends(require_role("admin"))],
    service: Annotated[ShipService, Depends(get_ship_service)],
) -> Response:
    await service.delete_ship(ship_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
