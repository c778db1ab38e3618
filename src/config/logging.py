"""
structlog setup.

Stock events are emitted as key/value pairs (``item_id``, ``quantity``,
``movement_id``...) so a reconciliation run can be followed line by line in
either renderer: colored console in development, one JSON object per line
everywhere else.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from src.config.settings import get_settings

# Third-party loggers that only add noise at INFO.
QUIET_LOGGERS = ("aiosqlite", "uvicorn.access", "multipart")


def add_service_identity(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    settings = get_settings()
    event_dict.setdefault("service", settings.app_name)
    event_dict.setdefault("env", settings.environment)
    return event_dict


def _processors(json_logs: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_service_identity,
    ]
    if json_logs:
        chain += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return chain


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Route structlog through the stdlib logging tree.

    Args:
        level: Overrides ``Settings.log_level``.
        json_logs: Forces the renderer; defaults to JSON outside development.
    """
    settings = get_settings()
    level = level or settings.log_level
    if json_logs is None:
        json_logs = not settings.is_development

    structlog.configure(
        processors=_processors(json_logs),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial: Any) -> structlog.stdlib.BoundLogger:
    """Named logger, with ``initial`` key/values bound to every event."""
    return structlog.get_logger(name, **initial)
