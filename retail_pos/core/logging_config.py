"""
Centralized Logging Configuration for Retail POS Billing

Provides:
- Consistent log format across all modules
- Structured JSON logging for production
- Request ID injection into log records

Usage:
    from retail_pos.core.logging_config import setup_logging, get_logger

    # At application startup
    setup_logging()

    # In modules
    logger = get_logger(__name__)
    logger.info("Quote built", extra={"lines": 3})
"""

import sys
import json
import logging
from datetime import datetime, timezone
from typing import Optional, Any
from contextvars import ContextVar

from retail_pos.core.config import settings

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "RequestIdFilter",
    "JsonFormatter",
    "LOG_LEVELS",
]

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Attributes every LogRecord carries; anything else came in through `extra`
_RESERVED_ATTRS = frozenset((
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "taskName", "message", "request_id",
))


def set_request_id(request_id: Optional[str]) -> None:
    """Set the current request ID for logging context"""
    request_id_var.set(request_id)


def get_request_id() -> Optional[str]:
    """Get the current request ID from logging context"""
    return request_id_var.get()


class RequestIdFilter(logging.Filter):
    """Adds request_id to every record from the context variable."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """JSON log formatter for log aggregation in production."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class StandardFormatter(logging.Formatter):
    """Text formatter with request ID for development."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] [%(request_id)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )


def _default_level() -> str:
    return settings.LOG_LEVEL or ("INFO" if settings.is_production else "DEBUG")


def _default_format() -> str:
    return settings.LOG_FORMAT or ("json" if settings.is_production else "text")


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format ("json" or "text")
    """
    level = level or _default_level()
    log_format = log_format or _default_format()

    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)
    root_logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(RequestIdFilter())

    if log_format.lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(StandardFormatter())

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.info(
        f"Logging configured: level={level}, format={log_format}, env={settings.ENVIRONMENT}"
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any
) -> None:
    """Log a message with extra context fields."""
    logger.log(level, message, extra=extra)
