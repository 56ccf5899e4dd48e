"""
Structured logging via structlog.

JSON lines in normal operation, a readable console renderer at DEBUG.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from projector.config import get_settings

APP_NAME = "projector"


def _add_app_name(logger: Any, method: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def configure_logging(level: str | None = None) -> None:
    """Configure structlog once at startup; `level` overrides the configured log level."""
    name = (level or get_settings().log_level).upper()
    log_level = getattr(logging, name, logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_app_name,
    ]
    if name == "DEBUG":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(sys.stdout),
        cache_logger_on_first_use=True,
    )
    # uvicorn and other stdlib loggers
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)


def get_logger(name: str = APP_NAME) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
