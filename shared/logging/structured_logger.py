"""structlog setup shared by the bloglist service and the phonebook client.

Log entries are event names with key/value fields, e.g.
``logger.info("blog_created", blog_id=..., owner_id=...)``. Every entry
carries an ISO timestamp, the level, the logger name, the app name and the
environment, plus anything bound with ``bind_context`` (the request
correlation id on the server).
"""

import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import EventDict, Processor


def app_context_processor(app_name: str, environment: str) -> Processor:
    """Processor stamping ``app`` and ``environment`` onto each entry."""

    def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("app", app_name)
        event_dict.setdefault("environment", environment)
        return event_dict

    return add_app_context


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: Optional[str] = None,
    environment: str = "development",
    stream: Any = None,
) -> None:
    """Route structlog through stdlib logging.

    Safe to call more than once; the last call wins (each test app
    reconfigures it).

    Args:
        log_level: Minimum level name, e.g. "INFO"
        json_logs: JSON lines when True, coloured console output otherwise
        service_name: Value of the ``app`` field
        environment: Value of the ``environment`` field
        stream: Where log lines go; stdout when omitted
    """
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        app_context_processor(service_name or "bloglist", environment),
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream or sys.stdout,
        level=getattr(logging, log_level.upper()),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach fields to every entry logged from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
