"""Authentication routes."""

from typing import Annotated

from fastapi import APIRouter, Depends

from operalog.routes.dependencies import get_any_context, get_auth_service
from operalog.schemas.auth import (
    AdminLoginRequest,
    AdminLoginResponse,
    AuthContext,
    CurrentPrincipalResponse,
    LogoutResponse,
    ShipLoginRequest,
    ShipLoginResponse,
)
from operalog.schemas.error import ErrorResponse
from operalog.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/login/admin",
    response_model=AdminLoginResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login_admin(
    payload: AdminLoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AdminLoginResponse:
    return await service.login_admin(email=payload.email, password=payload.password)


@router.post(
    "/login/ship",
    response_model=ShipLoginResponse,
    responses={401: {"model": ErrorResponse}},
)
async def login_ship(
    payload: ShipLoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> ShipLoginResponse:
    return await service.login_ship(username=payload.username, password=payload.password)


@router.post("/logout", response_model=LogoutResponse)
async def logout() -> LogoutResponse:
    # Tokens are stateless; the client discards its copy.
    return LogoutResponse()


@router.get(
    "/me",
    response_model=CurrentPrincipalResponse,
    response_model_exclude_none=True,
    responses={401: {"model": ErrorResponse}},
)
async def current_principal(
    context: Annotated[AuthContext, Depends(get_any_context)],
) -> CurrentPrincipalResponse:
    return AuthService.describe(context)
