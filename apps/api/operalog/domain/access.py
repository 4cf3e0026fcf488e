"""Role and report ownership rules applied after authentication."""

from __future__ import annotations

from collections.abc import Collection
import logging

from operalog.core.logging_safety import safe_log_identifier
from operalog.errors import ForbiddenError, UnauthenticatedError
from operalog.schemas.auth import AuthContext

logger = logging.getLogger(__name__)


def authorize_role(context: AuthContext | None, allowed_roles: Collection[str]) -> None:
    """Require a user principal whose role is in ``allowed_roles``."""
    if context is None or context.user is None:
        raise UnauthenticatedError("Authentication required")

    if context.user.role not in allowed_roles:
        logger.warning(
            "authz.role_denied principal_id=%s role=%s",
            safe_log_identifier(context.user.id, prefix="pid"),
            context.user.role,
        )
        raise ForbiddenError("Insufficient permissions")


def authorize_report_access(context: AuthContext, report_ship_id: int, *, message: str = "Access denied") -> None:
    """Users may touch any report; a ship only the reports tied to itself."""
    if not context.is_ship:
        return

    if context.ship.id != report_ship_id:
        logger.warning(
            "authz.report_denied principal_id=%s report_ship_id=%s",
            safe_log_identifier(context.ship.id, prefix="pid"),
            safe_log_identifier(report_ship_id, prefix="sid"),
        )
        raise ForbiddenError(message)


__all__ = ["authorize_report_access", "authorize_role"]
