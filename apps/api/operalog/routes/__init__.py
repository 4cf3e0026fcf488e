"""Route modules."""

from .auth import router as auth_router
from .health import router as health_router
from .reports import router as reports_router
from .ships import router as ships_router

__all__ = ["auth_router", "health_router", "reports_router", "ships_router"]
