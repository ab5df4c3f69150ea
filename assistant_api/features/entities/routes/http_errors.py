"""Translation of entity errors into HTTP errors."""

from fastapi import HTTPException, status

from assistant_api.features.entities.errors import (
    EntityNotFoundError,
    EntityOperationError,
    InvalidEntityError,
    MalformedEntityIdError,
    UnknownIdPrefixError,
)


def to_http_exception(error: Exception) -> HTTPException:
    """Map a domain error onto its HTTP status."""
    if isinstance(error, (InvalidEntityError, MalformedEntityIdError)):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))
    if isinstance(error, (EntityNotFoundError, UnknownIdPrefixError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, EntityOperationError):
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
        )
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )
