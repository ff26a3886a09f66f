"""gridsum core -- errors, structured logging and settings.

Architecture::

    errors.py     Typed error hierarchy (GridSumError, EmptyMatrixError)
    logging.py    structlog configuration + LogContext
    settings.py   GridSumSettings (pydantic-settings, GRIDSUM_ prefix)
"""

from gridsum.core.errors import (
    EmptyMatrixError,
    ErrorCategory,
    ErrorContext,
    ExecutionError,
    GridSumError,
    InvalidTransitionError,
    RowSumError,
    RowValueError,
    ValidationError,
)
from gridsum.core.logging import LogContext, configure_logging, get_logger
from gridsum.core.settings import GridSumSettings, configure_from_settings, get_settings

__all__ = [
    # errors
    "ErrorCategory",
    "ErrorContext",
    "GridSumError",
    "ValidationError",
    "EmptyMatrixError",
    "RowValueError",
    "ExecutionError",
    "RowSumError",
    "InvalidTransitionError",
    # logging
    "configure_logging",
    "get_logger",
    "LogContext",
    # settings
    "GridSumSettings",
    "get_settings",
    "configure_from_settings",
]
