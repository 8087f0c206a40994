"""Structured logging configuration.

Application events go through structlog; uvicorn and redis log through the
standard library and share the same handler, so one ``LOG_FORMAT`` switch
controls both.
"""

import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from rentdesk.config import get_settings

# Chatty third-party loggers kept at WARNING unless running at DEBUG
QUIET_LOGGERS = ("uvicorn.access", "redis")


def _stdlib_handler(log_format: str) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"levelname": "level", "asctime": "timestamp"},
            )
        )
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
    return handler


def setup_logging() -> None:
    """Configure structured logging for the application."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_stdlib_handler(settings.log_format))

    if log_level > logging.DEBUG:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.dev.set_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Every line carries the service and environment; mutations add their own keys
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        service="rentdesk", environment=settings.environment
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def bind_mutation_context(operation: str, **values: Any) -> None:
    """Attach the running mutation to every log line until cleared."""
    structlog.contextvars.bind_contextvars(operation=operation, **values)


def clear_mutation_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars("operation", *keys)
