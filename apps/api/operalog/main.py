"""FastAPI application entrypoint."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from operalog.adapters.db import AsyncpgDatastore, DatastoreError
from operalog.adapters.db.base import CHECK_VIOLATION, FOREIGN_KEY_VIOLATION, UNIQUE_VIOLATION
from operalog.core.config import get_settings
from operalog.core.logging_safety import configure_logging
from operalog.errors import ApiError
from operalog.repositories import InMemoryStore, OperaLogRepository, PostgresRepository
from operalog.routes import auth_router, health_router, reports_router, ships_router
from operalog.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_DATASTORE_ERRORS: dict[str, tuple[int, str, str]] = {
    UNIQUE_VIOLATION: (400, "UNIQUE_VIOLATION", "Resource already exists (unique constraint violated)"),
    FOREIGN_KEY_VIOLATION: (400, "FOREIGN_KEY_VIOLATION", "Invalid reference (foreign key)"),
    CHECK_VIOLATION: (400, "CHECK_VIOLATION", "Invalid data (check constraint)"),
}
_DATASTORE_UNAVAILABLE = (503, "DATABASE_UNAVAILABLE", "Database connection error")
_INTERNAL_ERROR = (500, "INTERNAL_ERROR", "Internal server error")


def datastore_error_response(exc: DatastoreError, *, expose_details: bool = False) -> tuple[int, ErrorResponse]:
    """Map a datastore failure to a user-facing status and payload."""
    if exc.connection_failed:
        status_code, code, message = _DATASTORE_UNAVAILABLE
    else:
        status_code, code, message = _DATASTORE_ERRORS.get(exc.sqlstate or "", _INTERNAL_ERROR)
    details = {"error": str(exc)} if expose_details else None
    return status_code, ErrorResponse(code=code, message=message, details=details)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    if getattr(app.state, "repository", None) is not None:
        yield
        return

    settings = get_settings()
    configure_logging(settings.log_level)
    if settings.storage_backend == "memory":
        app.state.repository = InMemoryStore()
        logger.warning("storage.memory_backend data will not persist across restarts")
        yield
        return

    if not settings.database_url:
        raise RuntimeError("OPERALOG_DATABASE_URL must be set for the postgres storage backend")
    datastore = AsyncpgDatastore(
        settings.database_url,
        min_size=settings.database_pool_min_size,
        max_size=settings.database_pool_max_size,
    )
    await datastore.connect()
    app.state.repository = PostgresRepository(datastore)
    try:
        yield
    finally:
        await datastore.close()


def create_app(
    repository: OperaLogRepository | None = None,
    *,
    cors_allow_origins: list[str] | None = None,
) -> FastAPI:
    app = FastAPI(title="OpéraLog API", version="1.0.0", lifespan=_lifespan)
    app.state.repository = repository

    if cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_allow_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(DatastoreError)
    async def handle_datastore_error(request: Request, exc: DatastoreError) -> JSONResponse:
        logger.error(
            "datastore.request_failed method=%s path=%s sqlstate=%s connection_failed=%s",
            request.method,
            request.url.path,
            exc.sqlstate,
            exc.connection_failed,
        )
        status_code, payload = datastore_error_response(
            exc,
            expose_details=get_settings().environment == "development",
        )
        return JSONResponse(status_code=status_code, content=payload.model_dump(mode="json", exclude_none=True))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(_, exc: RequestValidationError) -> JSONResponse:
        payload = ErrorResponse(
            code="VALIDATION_ERROR",
            message="Invalid request data",
            details={"errors": jsonable_encoder(exc.errors(), exclude={"ctx", "input", "url"})},
        )
        return JSONResponse(status_code=400, content=payload.model_dump(mode="json"))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            payload = ErrorResponse(code="ROUTE_NOT_FOUND", message=f"Route {request.url.path} not found")
        else:
            payload = ErrorResponse(code="HTTP_ERROR", message=str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content=payload.model_dump(mode="json", exclude_none=True),
            headers=getattr(exc, "headers", None),
        )

    api_prefix = "/api"
    app.include_router(health_router, prefix=api_prefix)
    app.include_router(auth_router, prefix=api_prefix)
    app.include_router(ships_router, prefix=api_prefix)
    app.include_router(reports_router, prefix=api_prefix)

    return app


def build_app_from_settings() -> FastAPI:
    """Application factory for ASGI servers, e.g. ``uvicorn --factory``."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return create_app(cors_allow_origins=settings.cors_allow_origins)
