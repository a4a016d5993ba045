"""
Global Exception Handlers

Custom exceptions and FastAPI exception handlers.
"""

from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging import get_logger

logger = get_logger(__name__)


class MovieBackendException(Exception):
    """Base exception for movie backend errors."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class BadRequestError(MovieBackendException):
    """Missing or invalid client input."""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=400)


class UnauthorizedError(MovieBackendException):
    """Missing, invalid or expired bearer token."""

    headers = {"WWW-Authenticate": "Bearer"}

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message, status_code=401)


class ForbiddenError(MovieBackendException):
    """Authenticated user may not touch this resource."""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message=message, status_code=403)


class UpstreamError(MovieBackendException):
    """
    TMDB returned a non-OK response (or could not be reached).

    The upstream status code is forwarded to the client unchanged.
    """

    GENERIC_MESSAGE = "Failed to fetch from TMDb API."

    def __init__(self, status_code: int, message: Optional[str] = None):
        super().__init__(
            message=message or self.GENERIC_MESSAGE,
            status_code=status_code
        )


class PersistenceError(MovieBackendException):
    """Document store failure. Details stay in the server logs."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            message="Internal server error. Please try again later.",
            status_code=500
        )


class ConfigurationError(MovieBackendException):
    """Server is missing required configuration."""

    def __init__(self, message: str):
        super().__init__(
            message=f"Server configuration error: {message}",
            status_code=500
        )


async def movie_exception_handler(
    request: Request,
    exc: MovieBackendException
) -> JSONResponse:
    """Handle MovieBackendException and return JSON response."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.message,
            "status_code": exc.status_code,
        },
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Invalid query/path/body parameters are client errors (400)."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"Invalid parameter {location}: {first.get('msg', 'invalid value')}"
    logger.debug("request_validation_failed", path=request.url.path, errors=len(errors))
    return JSONResponse(
        status_code=400,
        content={
            "error": True,
            "message": message,
            "status_code": 400,
        }
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(MovieBackendException, movie_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
