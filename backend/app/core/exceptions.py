"""
Custom exceptions and error handlers for consistent error responses.

Every error leaves the API as JSON with a ``message`` (and ``errors`` for
field validation). The HTTP status communicates the error class.
"""

import logging
from fastapi import Request, status
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, List, Optional

logger = logging.getLogger("carsawa.errors")


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers
        super().__init__(message)


class ValidationError(AppException):
    """Raised for malformed input that passed schema parsing (e.g. query parameters)."""

    def __init__(self, message: str = "Validation error", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            message=message,
            error_code="ERR_VALIDATION",
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"errors": errors} if errors else None,
        )


class DuplicateEmailError(AppException):
    """Raised when a dealer with the same email already exists."""

    def __init__(self, message: str = "Dealer already exists"):
        super().__init__(
            message=message,
            error_code="ERR_DUPLICATE_EMAIL",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class AuthenticationError(AppException):
    """Raised for authentication failures."""

    def __init__(self, message: str = "Not authorized, no token", error_code: str = "ERR_AUTH_001"):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenError(AuthenticationError):
    """Raised when a token is malformed or its signature does not verify."""

    def __init__(self, message: str = "Not authorized, token failed"):
        super().__init__(message=message, error_code="ERR_AUTH_002")


class ExpiredTokenError(AuthenticationError):
    """Raised when a token is past its expiry."""

    def __init__(self):
        super().__init__(message="Not authorized, token expired", error_code="ERR_AUTH_003")


class DealerNotFoundError(AuthenticationError):
    """Raised when a valid token references a dealer that no longer exists."""

    def __init__(self):
        super().__init__(message="Not authorized, dealer not found", error_code="ERR_AUTH_004")


class InvalidCredentialsError(AuthenticationError):
    """Raised on a failed email/password check."""

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message=message, error_code="ERR_AUTH_005")


class ForbiddenError(AppException):
    """Raised when an authenticated dealer does not own the resource."""

    def __init__(self, message: str = "Not authorized to access this resource"):
        super().__init__(
            message=message,
            error_code="ERR_PERM_001",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(
            message=f"{resource} not found",
            error_code="ERR_NOT_FOUND_001",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource": resource, "id": resource_id},
        )


class RateLimitExceededError(AppException):
    """Raised when a client exceeds the request budget for the current window."""

    def __init__(self, message: str = "Too many requests from this IP, please try again after 15 minutes"):
        super().__init__(
            message=message,
            error_code="ERR_RATE_LIMIT",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        )


class ImageHostError(AppException):
    """Raised when the external image host rejects a request or is unreachable."""

    def __init__(self, message: str = "Image host request failed"):
        super().__init__(
            message=message,
            error_code="ERR_IMAGE_HOST",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


def error_body(exc: AppException) -> Dict[str, Any]:
    body = {"message": exc.message, "error_code": exc.error_code}
    if exc.details.get("errors"):
        body["errors"] = exc.details["errors"]
    return body


# Global Exception Handlers

async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handler for custom application exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc),
        headers=exc.headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handler for FastAPI HTTPException with standardized format."""
    error_code_map = {
        400: "ERR_BAD_REQUEST",
        401: "ERR_UNAUTHORIZED",
        403: "ERR_FORBIDDEN",
        404: "ERR_NOT_FOUND",
        405: "ERR_METHOD_NOT_ALLOWED",
        500: "ERR_INTERNAL_SERVER"
    }

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.detail,
            "error_code": error_code_map.get(exc.status_code, "ERR_UNKNOWN"),
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handler for Pydantic validation errors (rendered as 400)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Validation error",
            "error_code": "ERR_VALIDATION",
            "errors": jsonable_encoder(exc.errors()),
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handler for unhandled exceptions."""
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "message": "Server error",
            "error_code": "ERR_INTERNAL_SERVER",
        }
    )
