"""
Structured logging configuration using structlog.

Production emits one JSON object per line; any other environment gets the
coloured console renderer. Request-scoped context (request ID, method, path)
is merged from contextvars by the request middleware.
"""

import logging
import sys
from typing import Optional

import structlog

from devevents.core.config import Settings, get_settings

HANDLER_NAME = "devevents"

QUIET_LOGGERS = ("uvicorn.access", "sqlalchemy.engine", "aiosqlite")


def _renderer(settings: Settings):
    if settings.ENVIRONMENT == "production":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=True)


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Route structlog through the stdlib root logger. Safe to call repeatedly."""
    settings = settings or get_settings()

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if settings.ENVIRONMENT == "production":
        processors.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings),
            ]
        )
    )

    root = logging.getLogger()
    # Lifespan runs again on reloads and in test apps
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
