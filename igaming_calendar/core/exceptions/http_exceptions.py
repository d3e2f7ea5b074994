"""HTTP exception hierarchy and the standardized error response.

Exception Hierarchy:
    AppError (HTTPException)
    ├── ClientError (4xx errors)
    │   └── BadRequestError (400)
    └── ServerError (5xx errors)
        ├── InternalServerError (500)
        ├── ConfigurationError (500)
        └── UpstreamServiceError (500)

Usage:
    # Option 1: Pass individual parameters
    raise BadRequestError(
        message="Invalid payload: events array is required",
        detail={"field": "events"},
    )

    # Option 2: Pass ErrorResponse object directly
    error = ErrorResponse(
        error_code="STORE_UNAVAILABLE",
        message="Failed to fetch reviewed events",
        detail={"details": "connect timeout"},
    )
    raise UpstreamServiceError(error)
"""

from typing import Any

from fastapi import HTTPException, status
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized error response model."""

    success: bool = Field(default=False, description="Always False for errors")
    error_code: str = Field(description="Error code identifier")
    message: str = Field(description="Human-readable error message")
    detail: dict[str, Any] | None = Field(default=None, description="Additional error details")
    path: str | None = Field(default=None, description="Request path where error occurred")


class AppError(HTTPException):
    """Base exception for all application HTTP errors."""

    def __init__(
        self,
        message: str | ErrorResponse = "An error occurred",
        error_code: str | None = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: dict[str, Any] | None = None,
    ) -> None:
        if isinstance(message, ErrorResponse):
            error_code, detail, message = message.error_code, message.detail, message.message

        # HTTPException stores its own detail; ours is set afterwards
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.detail = detail

    def to_error_response(self, path: str | None = None) -> ErrorResponse:
        """Convert exception to ErrorResponse object.

        Args:
            path: Request path where error occurred

        Returns:
            ErrorResponse object
        """
        return ErrorResponse(
            error_code=self.error_code,
            message=self.message,
            detail=self.detail,
            path=path,
        )


# ============================================================================
# Client Exceptions (4xx)
# ============================================================================


class ClientError(AppError):
    """Base exception for client errors (4xx)."""

    def __init__(
        self,
        message: str | ErrorResponse = "Client error",
        error_code: str | None = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status_code, detail)


class BadRequestError(ClientError):
    """400 Bad Request - Missing or malformed input."""

    def __init__(
        self,
        message: str | ErrorResponse = "Bad request",
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_400_BAD_REQUEST, detail)


# ============================================================================
# Server Exceptions (5xx)
# ============================================================================


class ServerError(AppError):
    """Base exception for server errors (5xx)."""

    def __init__(
        self,
        message: str | ErrorResponse = "Server error",
        error_code: str | None = None,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status_code, detail)


class InternalServerError(ServerError):
    """500 Internal Server Error - Unexpected server error."""

    def __init__(
        self,
        message: str | ErrorResponse = "Internal server error",
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class ConfigurationError(ServerError):
    """500 - A required setting or secret is missing."""

    def __init__(
        self,
        message: str | ErrorResponse = "Service is not configured",
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class UpstreamServiceError(ServerError):
    """500 - The document store or mail transport failed."""

    def __init__(
        self,
        message: str | ErrorResponse = "Upstream service failed",
        error_code: str | None = None,
        detail: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, error_code, status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
