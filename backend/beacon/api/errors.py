"""Map SOS domain errors to HTTP errors."""

from fastapi import HTTPException, status

from beacon.core.errors import (
    ContactNotFoundError,
    ContactValidationError,
    PreconditionError,
    RequesterNotFoundError,
    SosError,
    StorageError,
)

_STATUS_BY_ERROR: list[tuple[type[SosError], int]] = [
    (PreconditionError, status.HTTP_400_BAD_REQUEST),
    (ContactValidationError, status.HTTP_400_BAD_REQUEST),
    (RequesterNotFoundError, status.HTTP_404_NOT_FOUND),
    (ContactNotFoundError, status.HTTP_404_NOT_FOUND),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def http_error(exc: SosError) -> HTTPException:
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
