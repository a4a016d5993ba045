"""Core infrastructure modules."""

from .security import get_current_user
from .exceptions import (
    MovieBackendException,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    UpstreamError,
    PersistenceError,
)
from .logging import setup_logging, get_logger

__all__ = [
    "get_current_user",
    "MovieBackendException",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "UpstreamError",
    "PersistenceError",
    "setup_logging",
    "get_logger",
]
