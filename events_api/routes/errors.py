from fastapi import HTTPException, status

from events_api.services.exceptions import (
    Forbidden,
    NotFoundError,
    ServiceError,
    TooManyRequests,
    Unauthenticated,
    ValidationError,
)


def to_http_exception(error: ServiceError) -> HTTPException:
    """Map a service-layer exception onto the HTTP error returned to the client."""
    if isinstance(error, ValidationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": error.message, "errors": error.errors},
        )
    if isinstance(error, Unauthenticated):
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(error),
            headers={"WWW-Authenticate": "Bearer"},
        )
    if isinstance(error, Forbidden):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, TooManyRequests):
        return HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=str(error),
            headers={"Retry-After": str(error.retry_after)},
        )
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
