"""Map storefront and Protean exceptions to ``{"error": "..."}`` responses."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.shared.errors import (
    Forbidden,
    OrderCreationFailed,
    StorefrontError,
    Unauthenticated,
    error_message,
)

logger = structlog.get_logger(__name__)

SERVER_ERROR = "Server error"

# Checked in order; subclasses must precede their bases
ERROR_STATUS_CODES = (
    (ValidationError, 400),
    (ObjectNotFoundError, 404),
    (Unauthenticated, 401),
    (Forbidden, 403),
    (OrderCreationFailed, 500),
    (StorefrontError, 500),
)


def status_code_for(exc) -> int:
    for exc_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 500


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error(
            "Request failed",
            path=request.url.path,
            method=request.method,
            error_type=type(exc).__name__,
            error=str(exc.__cause__ or exc),
        )
    else:
        logger.info(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error=error_message(exc),
        )
    return _error_response(status_code, error_message(exc))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for error in exc.errors():
        # Drop the "body"/"query"/"path" prefix from the location
        location = [str(item) for item in error.get("loc", ())[1:]]
        message = error.get("msg", "Invalid value")
        parts.append(f"{'.'.join(location)}: {message}" if location else message)
    return _error_response(400, "; ".join(parts) or "Invalid request")


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error",
        path=request.url.path,
        method=request.method,
        error_type=type(exc).__name__,
    )
    return _error_response(500, SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    """Install the storefront's exception handlers on ``app``."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, domain_error_handler)
    app.add_exception_handler(ObjectNotFoundError, domain_error_handler)
    app.add_exception_handler(StorefrontError, domain_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
