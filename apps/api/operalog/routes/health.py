"""Health check route."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from operalog.core.config import Settings, get_settings
from operalog.repositories.base import OperaLogRepository
from operalog.routes.dependencies import get_repository

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(
    repository: Annotated[OperaLogRepository, Depends(get_repository)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> JSONResponse:
    connected = await repository.ping()
    return JSONResponse(
        status_code=status.HTTP_200_OK if connected else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "OK" if connected else "ERROR",
            "message": "OpéraLog API is running",
            "database": "Connected" if connected else "Disconnected",
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": settings.environment,
        },
    )
