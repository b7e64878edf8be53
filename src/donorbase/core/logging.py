"""structlog setup.

Development gets the colored console renderer, everything else one JSON
object per line. Request middleware binds ``correlation_id`` into the
context variables so every line logged while serving a request carries it.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from donorbase.core.config import Settings, get_settings

# Third-party loggers routed through the same level
_STDLIB_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def add_app_context(settings: Settings) -> Processor:
    """Processor stamping the app name and environment on every entry."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", settings.app_name)
        event_dict.setdefault("env", settings.environment)
        return event_dict

    return processor


def event_to_message(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    # Log calls pass event_id, so structlog's own "event" key is renamed
    if "event" in event_dict:
        event_dict["message"] = event_dict.pop("event")
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)
    console = settings.is_development or settings.log_format == "console"

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if console:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    else:
        processors += [
            add_app_context(settings),
            event_to_message,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=not console,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in _STDLIB_LOGGERS:
        logging.getLogger(name).setLevel(level)
    if not settings.db_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name or "donorbase")


def bind_correlation_id(correlation_id: str) -> None:
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def bind_event_id(event_id: str) -> None:
    """Tag the rest of the current request's log lines with the event."""
    structlog.contextvars.bind_contextvars(event_id=event_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
