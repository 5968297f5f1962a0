import logging
import uuid

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.domain.errors import (
    AlreadyCancelledError,
    AuthorizationError,
    ConflictError,
    DomainError,
    ExternalProcessorError,
    HasActiveBookingsError,
    InactiveResourceError,
    InvalidRangeError,
    InvalidSignatureError,
    InvalidStatusTransitionError,
    NoPaymentError,
    NotFoundError,
    NotPaidError,
    OptimisticLockError,
    PastBookingError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    UnauthorizedError: status.HTTP_401_UNAUTHORIZED,
    ConflictError: status.HTTP_409_CONFLICT,
    HasActiveBookingsError: status.HTTP_409_CONFLICT,
    OptimisticLockError: status.HTTP_409_CONFLICT,
    InvalidStatusTransitionError: status.HTTP_409_CONFLICT,
    InvalidRangeError: status.HTTP_400_BAD_REQUEST,
    InactiveResourceError: status.HTTP_400_BAD_REQUEST,
    AlreadyCancelledError: status.HTTP_400_BAD_REQUEST,
    PastBookingError: status.HTTP_400_BAD_REQUEST,
    InvalidSignatureError: status.HTTP_400_BAD_REQUEST,
    NoPaymentError: status.HTTP_400_BAD_REQUEST,
    NotPaidError: status.HTTP_400_BAD_REQUEST,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ExternalProcessorError: status.HTTP_502_BAD_GATEWAY,
}


def status_for(exc: DomainError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    log = logger.warning if status_code >= 500 else logger.info
    log(
        "Domain error",
        extra={
            "error_code": exc.code,
            "status_code": status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Last resort for unexpected errors.

    Logs the full error under an error_id and returns a generic 500 without
    exposing the stack trace to the client.
    """
    error_id = str(uuid.uuid4())
    logger.error(
        "Unhandled exception occurred",
        exc_info=exc,
        extra={
            "error_id": error_id,
            "path": request.url.path,
            "method": request.method,
            "client_host": request.client.host if request.client else None,
        },
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "code": "INTERNAL_ERROR", "error_id": error_id},
    )
