"""Tests for the gridsum error hierarchy."""

import pytest

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


class TestErrorContext:
    """Test ErrorContext serialisation."""

    def test_to_dict_excludes_none(self):
        assert ErrorContext().to_dict() == {}

    def test_to_dict_includes_metadata(self):
        ctx = ErrorContext(run_id="abc", row_index=0)
        ctx.metadata["column"] = 2
        assert ctx.to_dict() == {"run_id": "abc", "row_index": 0, "column": 2}


class TestGridSumError:
    """Test the base error."""

    def test_defaults(self):
        error = GridSumError("boom")
        assert error.message == "boom"
        assert str(error) == "boom"
        assert error.category == ErrorCategory.INTERNAL
        assert error.cause is None

    def test_with_context_sets_known_fields(self):
        error = GridSumError("boom").with_context(run_id="r1", row_index=3, extra="x")
        assert error.context.run_id == "r1"
        assert error.context.row_index == 3
        assert error.context.metadata == {"extra": "x"}

    def test_with_context_returns_self(self):
        error = GridSumError("boom")
        assert error.with_context(run_id="r1") is error

    def test_cause_is_chained(self):
        original = ZeroDivisionError("division by zero")
        error = ExecutionError("row failed", cause=original)
        assert error.__cause__ is original
        assert error.to_dict()["cause"] == "division by zero"

    def test_to_dict(self):
        d = GridSumError("boom").with_context(run_id="r1").to_dict()
        assert d == {
            "error_type": "GridSumError",
            "message": "boom",
            "category": "INTERNAL",
            "context": {"run_id": "r1"},
        }

    def test_repr(self):
        assert repr(GridSumError("boom")) == "GridSumError('boom', category=INTERNAL)"


class TestSubclasses:
    """Test the concrete errors."""

    def test_empty_matrix_error(self):
        error = EmptyMatrixError()
        assert isinstance(error, ValidationError)
        assert error.category == ErrorCategory.VALIDATION
        assert error.field == "matrix"
        assert "empty" in str(error)

    def test_row_value_error(self):
        error = RowValueError(2, 1, "x")
        assert error.context.row_index == 2
        assert error.column == 1
        assert error.value == "x"
        d = error.to_dict()
        assert d["field"] == "matrix[2][1]"
        assert d["value"] == "'x'"
        assert d["context"] == {"row_index": 2}

    def test_row_sum_error(self):
        error = RowSumError(4)
        assert error.category == ErrorCategory.EXECUTION
        assert error.context.row_index == 4
        assert str(error) == "Row 4 failed to sum"

    def test_row_sum_error_custom_message(self):
        assert str(RowSumError(0, "overflow")) == "overflow"

    def test_invalid_transition_error(self):
        error = InvalidTransitionError("completed", "joining")
        assert error.category == ErrorCategory.STATE
        assert isinstance(error, ValueError)

