"""
Error Taxonomy and Handlers

Services raise ``AppError`` subclasses. The handlers registered by
``register_exception_handlers`` turn every failure that reaches the
framework into the uniform body::

    {"success": false, "error": "<ERROR_CODE>", "message": "<text>"}
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base exception for application errors."""

    def __init__(
        self,
        message: str,
        error_code: str = "APP_ERROR",
        status_code: int = 400,
        headers: dict[str, str] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.headers = headers
        super().__init__(message)


class ValidationError(AppError):
    """Missing or malformed input."""

    def __init__(self, message: str):
        super().__init__(message, error_code="VALIDATION_ERROR", status_code=400)


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials."""

    def __init__(self, message: str = "Please login to access this resource"):
        super().__init__(
            message,
            error_code="UNAUTHENTICATED",
            status_code=401,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(AppError):
    """Authenticated, but not allowed to perform the action."""

    def __init__(self, message: str = "You are not allowed to access this resource"):
        super().__init__(message, error_code="FORBIDDEN", status_code=403)


class NotFoundError(AppError):
    """A referenced record does not exist (or is not visible to the caller)."""

    def __init__(self, resource: str, resource_id: object | None = None):
        message = f"{resource} {resource_id} not found" if resource_id else f"{resource} not found"
        super().__init__(message, error_code="NOT_FOUND", status_code=404)


class ConflictError(AppError):
    """The request conflicts with the current state of a record."""

    def __init__(self, message: str):
        super().__init__(message, error_code="CONFLICT", status_code=409)


class RateLimitExceeded(AppError):
    """Too many requests in the current window."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            f"Rate limit exceeded. Maximum {limit} requests per {window_seconds} seconds.",
            error_code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            headers={"Retry-After": str(window_seconds)},
        )


class UpstreamError(AppError):
    """An external service (media host) failed."""

    def __init__(self, message: str):
        super().__init__(message, error_code="UPSTREAM_ERROR", status_code=500)


def error_response(
    status_code: int,
    error_code: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error_code, "message": message},
        headers=headers,
    )


_LOCATION_PREFIXES = ("body", "query", "path", "header", "cookie")


def format_errors(errors: Sequence[Mapping[str, Any]]) -> str:
    """Flatten pydantic error dicts into one readable message."""
    parts = []
    for error in errors:
        # Drop the "body"/"query"/"path" prefix from the location
        location = [str(item) for item in error.get("loc", ()) if item not in _LOCATION_PREFIXES]
        field = ".".join(location)
        message = str(error.get("msg", "")).removeprefix("Value error, ")
        parts.append(f"{field}: {message}" if field else message)
    return "; ".join(parts) or "Invalid request"


async def app_error_handler(_request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")
    return error_response(exc.status_code, exc.error_code, exc.message, exc.headers)


async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, "HTTP_ERROR", message, getattr(exc, "headers", None))


async def request_validation_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        format_errors(exc.errors()),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the uniform error formatters to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


__all__ = [
    "AppError",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "NotFoundError",
    "RateLimitExceeded",
    "UpstreamError",
    "ValidationError",
    "format_errors",
    "register_exception_handlers",
]
