"""
Application errors and the handlers that turn them into JSON responses.

Every error body has the shape {"error": "<message>", ...details}. Internal
messages and stack traces are logged, never returned.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to a specific HTTP status."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers
        super().__init__(message)


class MissingCredentialsError(AppError):
    """Login attempted without a username or password."""

    def __init__(self, message: str = "Username and password are required") -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class InvalidCredentialsError(AppError):
    """Unknown identifier or wrong password; the two are deliberately indistinguishable."""

    def __init__(self) -> None:
        super().__init__("Invalid credentials", status.HTTP_401_UNAUTHORIZED)


class AccountDeactivatedError(AppError):
    def __init__(self) -> None:
        super().__init__("Account is deactivated", status.HTTP_401_UNAUTHORIZED)


class MissingTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(
            "Access token required",
            status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidTokenError(AppError):
    """Token is malformed, has a bad signature, is expired, or lacks claims."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired token", status.HTTP_403_FORBIDDEN)


class InsufficientPermissionsError(AppError):
    def __init__(self, required: list[str], current: str | None) -> None:
        super().__init__(
            "Insufficient permissions",
            status.HTTP_403_FORBIDDEN,
            details={"required": required, "current": current},
        )


class NotFoundError(AppError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message, status.HTTP_404_NOT_FOUND)


class ServiceError(AppError):
    """A backend failure surfaced to the client with a generic message."""

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _error_response(
    status_code: int,
    message: str,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if details:
        content.update(details)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_response(exc.status_code, exc.message, exc.details, exc.headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown paths and known paths with the wrong method are both "not found".
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _error_response(status.HTTP_404_NOT_FOUND, "Endpoint not found")
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return _error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected malformed request to %s: %s", request.url.path, exc.errors())
    return _error_response(status.HTTP_400_BAD_REQUEST, "Invalid request body")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s",
        request.method,
        request.url.path,
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all JSON error handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
