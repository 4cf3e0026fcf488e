"""Dependency wiring for routes."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import timedelta
import logging
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from operalog.adapters.auth import JwtTokenCodec, TokenCodec
from operalog.core.config import Settings, get_settings
from operalog.core.logging_safety import safe_log_identifier
from operalog.domain.access import authorize_role
from operalog.errors import UnauthenticatedError
from operalog.repositories.base import OperaLogRepository
from operalog.schemas.auth import AuthContext
from operalog.services.auth import AuthService
from operalog.services.authentication import AuthenticationError, AuthenticationGate, AuthKind
from operalog.services.principals import PrincipalResolver
from operalog.services.reports import ReportService
from operalog.services.ships import ShipService

bearer_scheme = HTTPBearer(auto_error=False, scheme_name="bearerAuth")
logger = logging.getLogger(__name__)


def _request_correlation_id(request: Request) -> str:
    existing = getattr(request.state, "correlation_id", None)
    if isinstance(existing, str) and existing:
        return existing

    correlation_id = request.headers.get("X-Correlation-Id")
    if correlation_id:
        request.state.correlation_id = correlation_id
        return correlation_id

    generated = f"req-{uuid4()}"
    request.state.correlation_id = generated
    return generated


def get_repository(request: Request) -> OperaLogRepository:
    return request.app.state.repository


def get_token_codec(settings: Annotated[Settings, Depends(get_settings)]) -> TokenCodec:
    return JwtTokenCodec(
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        default_ttl=timedelta(seconds=settings.jwt_expires_in_seconds),
    )


def get_authentication_gate(
    repository: Annotated[OperaLogRepository, Depends(get_repository)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthenticationGate:
    return AuthenticationGate(codec, PrincipalResolver(repository))


def _authenticator(kind: AuthKind) -> Callable[..., Awaitable[AuthContext]]:
    async def authenticate(
        request: Request,
        credentials: Annotated[HTTPAuthorizationCredentials | None, Security(bearer_scheme)],
        gate: Annotated[AuthenticationGate, Depends(get_authentication_gate)],
    ) -> AuthContext:
        """Validate the bearer token and return the resolved request context."""
        correlation_id = safe_log_identifier(_request_correlation_id(request), prefix="cid")
        token = credentials.credentials if credentials is not None else None

        try:
            context = await gate.authenticate(kind, token)
        except AuthenticationError as exc:
            logger.warning(
                "auth.rejected correlation_id=%s method=%s path=%s required=%s reason=%s",
                correlation_id,
                request.method,
                request.url.path,
                kind.value,
                exc.failure.value,
            )
            raise UnauthenticatedError(str(exc)) from exc

        logger.info(
            "auth.accepted correlation_id=%s method=%s path=%s principal_type=%s principal_id=%s",
            correlation_id,
            request.method,
            request.url.path,
            context.principal_type.value,
            safe_log_identifier(context.principal_id, prefix="pid"),
        )
        return context

    return authenticate


get_user_context = _authenticator(AuthKind.USER)
get_ship_context = _authenticator(AuthKind.SHIP)
get_any_context = _authenticator(AuthKind.EITHER)


def require_role(*roles: str) -> Callable[..., Awaitable[AuthContext]]:
    """Dependency requiring an authenticated user holding one of ``roles``."""
    allowed = frozenset(roles)

    async def check_role(context: Annotated[AuthContext, Depends(get_user_context)]) -> AuthContext:
        authorize_role(context, allowed)
        return context

    return check_role


def get_auth_service(
    repository: Annotated[OperaLogRepository, Depends(get_repository)],
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
) -> AuthService:
    return AuthService(repository, codec)


def get_ship_service(repository: Annotated[OperaLogRepository, Depends(get_repository)]) -> ShipService:
    return ShipService(repository)


def get_report_service(repository: Annotated[OperaLogRepository, Depends(get_repository)]) -> ReportService:
    return ReportService(repository)
