"""Exception handling package for the calendar API.

Provides the HTTP exception hierarchy, domain exceptions raised by the store
and mail layers, and handlers producing standardized error responses.
"""

from .domain import DocumentStoreError, MailDeliveryError, PaginationLimitError
from .handlers import register_exception_handlers
from .http_exceptions import (
    AppError,
    BadRequestError,
    ClientError,
    ConfigurationError,
    ErrorResponse,
    InternalServerError,
    ServerError,
    UpstreamServiceError,
)

__all__ = [
    # Base exceptions
    "AppError",
    # Client exceptions (4xx)
    "BadRequestError",
    "ClientError",
    # Server exceptions (5xx)
    "ConfigurationError",
    # Domain exceptions
    "DocumentStoreError",
    # Models
    "ErrorResponse",
    "InternalServerError",
    "MailDeliveryError",
    "PaginationLimitError",
    "ServerError",
    "UpstreamServiceError",
    # Handlers
    "register_exception_handlers",
]
