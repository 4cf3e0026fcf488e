"""Application exception types."""

from operalog.schemas.error import ErrorResponse


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(code=code, message=message, details=details)
        super().__init__(message)


class UnauthenticatedError(ApiError):
    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(status_code=401, code="UNAUTHORIZED", message=message)


class InvalidCredentialsError(ApiError):
    def __init__(self, message: str = "Invalid credentials") -> None:
        super().__init__(status_code=401, code="INVALID_CREDENTIALS", message=message)


class ForbiddenError(ApiError):
    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(status_code=403, code="FORBIDDEN", message=message)


class NotFoundError(ApiError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(status_code=404, code="RESOURCE_NOT_FOUND", message=message)


class DuplicateReportError(ApiError):
    """A report already exists for the ship and date."""

    def __init__(self, ship_id: int, report_date: object) -> None:
        super().__init__(
            status_code=409,
            code="DUPLICATE_REPORT",
            message="A report already exists for this date",
            details={"ship_id": ship_id, "report_date": str(report_date)},
        )


class NoFieldsToUpdateError(ApiError):
    def __init__(self, message: str = "No updatable fields supplied") -> None:
        super().__init__(status_code=400, code="NO_FIELDS_TO_UPDATE", message=message)


__all__ = [
    "ApiError",
    "DuplicateReportError",
    "ForbiddenError",
    "InvalidCredentialsError",
    "NoFieldsToUpdateError",
    "NotFoundError",
    "UnauthenticatedError",
]
