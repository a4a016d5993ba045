"""
Structured Logging Configuration

structlog with a console renderer in development and JSON elsewhere.
TMDB authenticates with an `api_key` query parameter, so every rendered
event is scrubbed of it before output.
"""

import logging
import re
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from ..config import get_settings

# Libraries that log full request URLs at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "urllib3", "google.auth")

_API_KEY_PARAM = re.compile(r"(api_key=)[^&\s'\"]+")


def redact_secrets(value: Any) -> Any:
    if isinstance(value, str):
        return _API_KEY_PARAM.sub(r"\1***", value)
    return value


def redact_api_keys(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """structlog processor masking `api_key=` values in string fields."""
    return {key: redact_secrets(value) for key, value in event_dict.items()}


def setup_logging(log_level: Optional[str] = None):
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Override the configured level (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()

    if log_level is None:
        log_level = settings.log_level or ("DEBUG" if settings.debug else "INFO")
    level = getattr(logging, log_level.upper())

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        redact_api_keys,
    ]

    if settings.environment == "development":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = "movie_backend") -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
