"""Centralized exception hierarchy and handlers for the application.

This module provides a unified exception system that maps all application errors
to appropriate HTTP status codes and response formats. Services and routes
raise exceptions from this hierarchy rather than generic exceptions or
HTTPException directly.

Exception Hierarchy:
    AppException (base)
    ├── ValidationError (400)
    ├── AuthenticationError (401)
    ├── NotFoundError (404)
    ├── ConflictError (409)
    ├── ConsistencyError (500)
    └── StoreError (500)

Ownership failures are reported as NotFoundError, never as a permission error,
so callers cannot probe for the existence of another user's books, pockets,
allocations or holdings.

Usage in Services:
    from moneybook.core.exceptions import ValidationError

    def split(source_amount: int, weights: list) -> list:
        if source_amount <= 0:
            raise ValidationError("Source amount must be positive")
        ...

The exception handler automatically converts these to HTTP responses.
"""

import logging
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Base exception class for all application errors.

    Provides standard structure for application exceptions that can be
    automatically converted to HTTP responses with appropriate status codes.

    Attributes:
        status_code: HTTP status code for this error type
        detail: User-facing error message
        error_code: Machine-readable error code (optional)
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Internal server error"
    error_code: str | None = None

    def __init__(
        self,
        detail: str | None = None,
        *,
        error_code: str | None = None,
    ) -> None:
        """
        Initialize the exception.

        Args:
            detail: Custom error message (overrides class default)
            error_code: Machine-readable error identifier
        """
        self.detail = detail or self.__class__.detail
        self.error_code = error_code or self.__class__.error_code
        super().__init__(self.detail)


class ValidationError(AppException):
    """
    Raised when input validation fails.

    Used for missing fields, non-positive amounts, percentages outside
    [0, 100] and empty pocket weight lists. Always raised before any
    store mutation. Maps to HTTP 400 Bad Request.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Validation error"
    error_code = "VALIDATION_ERROR"


class AuthenticationError(AppException):
    """
    Raised when authentication fails.

    Used for invalid credentials, expired tokens, or missing authentication.
    Maps to HTTP 401 Unauthorized.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Authentication failed"
    error_code = "AUTHENTICATION_ERROR"


class NotFoundError(AppException):
    """
    Raised when a requested resource is not found.

    Also raised when the resource exists but belongs to another user.
    Maps to HTTP 404 Not Found.
    """

    status_code = status.HTTP_404_NOT_FOUND
    detail = "Resource not found"
    error_code = "NOT_FOUND"


class ConflictError(AppException):
    """
    Raised when there's a conflict in the operation.

    Used for duplicate entries such as renaming a holding onto an existing
    (asset, platform, instrument) combination.
    Maps to HTTP 409 Conflict.
    """

    status_code = status.HTTP_409_CONFLICT
    detail = "Resource conflict"
    error_code = "CONFLICT"


class ConsistencyError(AppException):
    """
    Raised when an internal invariant is broken.

    Not a user-facing condition: it signals a programming-contract violation,
    e.g. an allocation item with no computed amount.
    Maps to HTTP 500 Internal Server Error.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Internal consistency error"
    error_code = "CONSISTENCY_ERROR"


class StoreError(AppException):
    """
    Raised when the relational store fails.

    Wraps connection failures and constraint violations raised while a
    unit of work was being written. The unit of work has already been
    rolled back when this is raised. No retry is attempted.
    Maps to HTTP 500 Internal Server Error.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database operation failed"
    error_code = "STORE_ERROR"


async def app_exception_handler(
    request: Request,
    exc: AppException,
) -> JSONResponse:
    """
    Handle application exceptions and convert to HTTP responses.

    Args:
        request: FastAPI request object
        exc: The exception instance

    Returns:
        JSONResponse with error details and HTTP status code

    Response Format:
        {
            "detail": "User-facing error message",
            "error_code": "MACHINE_READABLE_CODE"  # optional
        }
    """
    if exc.status_code >= 500:
        logger.error(
            f"{exc.__class__.__name__}: {exc.detail}",
            exc_info=True,
            extra={
                "status_code": exc.status_code,
                "error_code": exc.error_code,
                "request_path": request.url.path,
            },
        )
    else:
        logger.warning(
            f"{exc.__class__.__name__}: {exc.detail}",
            extra={
                "status_code": exc.status_code,
                "error_code": exc.error_code,
                "request_path": request.url.path,
            },
        )

    response_body: dict[str, Any] = {"detail": exc.detail}
    if exc.error_code:
        response_body["error_code"] = exc.error_code

    return JSONResponse(
        status_code=exc.status_code,
        content=response_body,
    )
