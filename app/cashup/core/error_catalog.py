from dataclasses import dataclass
from fastapi import status


@dataclass(frozen=True)
class ErrorDefinition:
    code: str
    message: str
    status_code: int


class ErrorCatalog:
    VALIDATION_ERROR = ErrorDefinition(
        "VALIDATION_ERROR",
        "Validation error",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    EMPTY_BATCH = ErrorDefinition(
        "EMPTY_BATCH",
        "Batch must contain at least one record",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    STORE_REQUIRED = ErrorDefinition(
        "STORE_REQUIRED",
        "Store is required",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    CHECKED_ROW_NOT_FOUND = ErrorDefinition(
        "CHECKED_ROW_NOT_FOUND",
        "No cash count matches the time key",
        status.HTTP_404_NOT_FOUND,
    )
    EMPTY_TOPUP = ErrorDefinition(
        "EMPTY_TOPUP",
        "Top-up must add units to at least one denomination",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    UNKNOWN_DENOMINATION = ErrorDefinition(
        "UNKNOWN_DENOMINATION",
        "Unknown denomination",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
    DB_UNAVAILABLE = ErrorDefinition(
        "DB_UNAVAILABLE",
        "Database unavailable",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    LOCK_TIMEOUT = ErrorDefinition(
        "LOCK_TIMEOUT",
        "Database lock timeout",
        status.HTTP_503_SERVICE_UNAVAILABLE,
    )
    INTERNAL_ERROR = ErrorDefinition(
        "INTERNAL_ERROR",
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


class AppError(Exception):
    def __init__(self, error: ErrorDefinition, details: object | None = None):
        self.error = error
        self.details = details
        super().__init__(error.message)
