"""
Structured error types for gridsum.

Every failure the library surfaces is a :class:`GridSumError`. Errors carry a
category for routing, an :class:`ErrorContext` with the run and row they came
from, and an optional chained cause.

Manifesto:
    - **Typed Error Hierarchy:** Caller contract violations are
      ``ValidationError``; failures while computing are ``ExecutionError``
    - **No Retries:** Every gridsum error is permanent for the given input
    - **Rich Context:** Errors carry run_id / row_index for diagnostics
    - **Error Chaining:** Preserve original exceptions as ``cause``

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                      GridSumError                         │
        │           (category, context, cause)                      │
        ├──────────────────────────────────────────────────────────┤
        │  ValidationError        ExecutionError                    │
        │  (VALIDATION)           (EXECUTION)                       │
        │       │                      │                            │
        │  EmptyMatrixError       RowSumError                       │
        │  RowValueError                                            │
        │                                                           │
        │  InvalidTransitionError (STATE, also a ValueError)        │
        └──────────────────────────────────────────────────────────┘

Examples:
    >>> error = EmptyMatrixError()
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.with_context(run_id="abc").to_dict()["context"]
    {'run_id': 'abc'}

Tags:
    error-handling, exception-hierarchy, error-context, gridsum
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification."""

    VALIDATION = "VALIDATION"
    EXECUTION = "EXECUTION"
    STATE = "STATE"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        run_id: Identifier of the matrix-sum run that failed
        row_index: Zero-based position of the row involved, if any
        metadata: Additional key-value pairs
    """

    run_id: str | None = None
    row_index: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["run_id", "row_index"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class GridSumError(Exception):
    """
    Base exception for all gridsum errors.

    Subclasses set ``default_category`` so callers can route on category
    without matching on concrete types.

    Examples:
        >>> error = GridSumError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'GridSumError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> GridSumError:
        """
        Add context to this error (fluent API).

        Usage:
            raise RowSumError("Row failed").with_context(run_id=run_id, row_index=2)
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(GridSumError):
    """
    Input validation error.

    Raised for caller contract violations. The same input always fails the
    same way.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class EmptyMatrixError(ValidationError):
    """The matrix to sum has zero rows."""

    def __init__(self, message: str = "Cannot sum an empty matrix", **kwargs: Any):
        super().__init__(message, field="matrix", **kwargs)


class RowValueError(ValidationError):
    """A row contains a value that is not a number."""

    def __init__(self, row_index: int, column: int, value: Any, **kwargs: Any):
        super().__init__(
            f"Row {row_index} column {column}: {value!r} is not a number",
            field=f"matrix[{row_index}][{column}]",
            value=value,
            **kwargs,
        )
        self.context.row_index = row_index
        self.column = column


# =============================================================================
# EXECUTION ERRORS
# =============================================================================


class ExecutionError(GridSumError):
    """Failure while a deferred computation was running.

    The built-in row summer cannot fail once a row has been validated, so
    gridsum never raises this itself.  It is the type to raise from a
    :class:`~gridsum.execution.row_summer.RowSummer` subclass whose row
    computation can fail; the matrix join passes it through unchanged and
    adds the run_id.
    """

    default_category = ErrorCategory.EXECUTION


class RowSumError(ExecutionError):
    """A single row computation failed.

    Example:
        class CheckedRowSummer(RowSummer):
            async def _compute(self, values, index):
                total = await super()._compute(values, index)
                if math.isinf(total):
                    raise RowSumError(index, f"Row {index} overflowed")
                return total
    """

    def __init__(self, row_index: int, message: str | None = None, **kwargs: Any):
        super().__init__(message or f"Row {row_index} failed to sum", **kwargs)
        self.context.row_index = row_index


# =============================================================================
# STATE MACHINE ERRORS
# =============================================================================


class InvalidTransitionError(GridSumError, ValueError):
    """Raised when an illegal run-state transition is attempted."""

    default_category = ErrorCategory.STATE

    def __init__(self, current: str, target: str, enum_name: str = "SumState") -> None:
        self.current = current
        self.target = target
        super().__init__(f"Invalid {enum_name} transition: {current} → {target}")


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "GridSumError",
    # Validation
    "ValidationError",
    "EmptyMatrixError",
    "RowValueError",
    # Execution
    "ExecutionError",
    "RowSumError",
    # State
    "InvalidTransitionError",
]
