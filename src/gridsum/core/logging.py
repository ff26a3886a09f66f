"""
gridsum Logging - Structured logging for deferred computations.

Manifesto:
    Ordering is the whole point of the deferred summation: which row added
    which value, and when the total was computed, is what a reader watches.
    Every event is a ``noun.verb`` name plus key/value fields, and the fields
    that place an event in a run (``run_id``, ``row``) come right after the
    event name so interleaved rows stay readable.

    - **Correlates:** run_id is bound for the duration of a matrix-sum run
    - **Stays out of the way:** Log events are never part of the result

Architecture:
    ::

        configure_logging(level="INFO", json_format=None, service="gridsum")
            ↓
        structlog processor chain:
          1. merge_contextvars (run_id)
          2. add_log_level
          3. TimeStamper (iso)
          4. add_service
          5. order_fields (timestamp, level, event, logger_name, run_id, row)
          6. JSONRenderer or ConsoleRenderer

        logger = get_logger(__name__)
        logger.debug("row_sum.add", row=0, value=3)

Examples:
    >>> from gridsum.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> logger = get_logger(__name__)
    >>> logger.info("matrix_sum.completed", total=45)

Tags:
    logging, structlog, gridsum
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

_SERVICE_NAME = "gridsum"

# Leading fields of every rendered event; anything else follows in call order.
_FIELD_ORDER = ("timestamp", "level", "event", "logger_name", "run_id", "row")


def _add_service(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", _SERVICE_NAME)
    return event_dict


def _order_fields(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Move the run-locating fields to the front of the event."""
    ordered = {key: event_dict.pop(key) for key in _FIELD_ORDER if key in event_dict}
    ordered.update(event_dict)
    return ordered


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "gridsum",
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for gridsum.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name attached to every event as ``service``
        add_timestamp: Include ISO timestamp in logs
    """
    global _SERVICE_NAME
    _SERVICE_NAME = service

    if json_format is None:
        json_format = not sys.stdout.isatty()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
    ]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [_add_service, _order_fields]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty(), sort_keys=False)
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``).

    The name is bound as the ``logger_name`` field of every event.  The
    returned proxy is lazy, so loggers created at import time follow a later
    :func:`configure_logging`.
    """
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(logger_name=name)


class LogContext:
    """Bind key/value pairs to every event logged inside the ``with`` block.

    Each asyncio task copies the context it was created in, so binding
    ``run_id`` before spawning row tasks tags their events too.

    Example:
        with LogContext(run_id="abc123"):
            logger.info("matrix_sum.called")
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        structlog.contextvars.bind_contextvars(**self._context)
        return self

    def __exit__(self, *args: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self._context)


__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
]
