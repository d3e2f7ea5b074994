"""Exception handlers for the calendar API.

Every failure leaves the service as a structured ``ErrorResponse``; nothing
propagates uncaught to the transport layer.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from .domain import DocumentStoreError, MailDeliveryError
from .http_exceptions import AppError, ErrorResponse, InternalServerError, UpstreamServiceError

logger = logging.getLogger(__name__)


def _json(status_code: int, error_response: ErrorResponse) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(exclude_none=True),
    )


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle AppError and its subclasses.

    Args:
        request: FastAPI request
        exc: Application exception

    Returns:
        JSON response with standardized error format
    """
    return _json(exc.status_code, exc.to_error_response(path=request.url.path))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle request body/query validation errors as 400 Bad Request.

    Missing required fields, blank names and malformed dates all land here
    before any store call is made.
    """
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]
    error_response = ErrorResponse(
        error_code="ValidationError",
        message="Request validation failed",
        detail={"errors": errors},
        path=request.url.path,
    )
    return _json(status.HTTP_400_BAD_REQUEST, error_response)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Handle SQLAlchemy IntegrityError raised by the SQL document store."""
    logger.error(f"Database integrity error: {exc}", exc_info=True)

    error_response = ErrorResponse(
        error_code="IntegrityError",
        message="Database constraint violation",
        detail={"database_error": str(exc.orig) if hasattr(exc, "orig") else str(exc)},
        path=request.url.path,
    )
    return _json(status.HTTP_409_CONFLICT, error_response)


async def upstream_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle store and mail failures that a route did not translate itself."""
    logger.error(f"Upstream dependency error: {exc}", exc_info=True)

    detail: dict[str, Any] = {"details": str(exc)}
    if isinstance(exc, DocumentStoreError) and exc.status_code is not None:
        detail["upstream_status"] = exc.status_code

    upstream_exc = UpstreamServiceError(
        message="Upstream service request failed",
        error_code=type(exc).__name__,
        detail=detail,
    )
    return _json(upstream_exc.status_code, upstream_exc.to_error_response(path=request.url.path))


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions (500).

    Args:
        request: FastAPI request
        exc: Unexpected exception

    Returns:
        JSON response with generic error message
    """
    logger.error(f"Unexpected error: {exc}", exc_info=True)

    internal_exc = InternalServerError(
        message="An unexpected error occurred",
        detail={"error": str(exc)} if logger.isEnabledFor(logging.DEBUG) else None,
    )
    return _json(internal_exc.status_code, internal_exc.to_error_response(path=request.url.path))


def register_exception_handlers(app: Any) -> None:
    """Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppError, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(DocumentStoreError, upstream_exception_handler)
    app.add_exception_handler(MailDeliveryError, upstream_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
