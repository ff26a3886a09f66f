"""Run models for matrix summation: results, states, and the run record.

A matrix-sum call moves through a small state machine.  Transitions are
enforced via ``SUM_VALID_TRANSITIONS``; the :class:`MatrixSumRun` record
refuses any move the table does not list.

Valid transition graph::

    CREATED     → VALIDATING
    VALIDATING  → FANNING_OUT | FAILED
    FANNING_OUT → DEFERRING
    DEFERRING   → JOINING
    JOINING     → REDUCING | FAILED
    REDUCING    → COMPLETED | FAILED
    COMPLETED   → (terminal)
    FAILED      → (terminal)
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gridsum.core.errors import InvalidTransitionError


class SumState(str, Enum):
    """State of a single matrix-sum call."""

    CREATED = "created"
    VALIDATING = "validating"
    FANNING_OUT = "fanning_out"
    DEFERRING = "deferring"
    JOINING = "joining"
    REDUCING = "reducing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return not SUM_VALID_TRANSITIONS[self]


SUM_VALID_TRANSITIONS: dict[SumState, frozenset[SumState]] = {
    SumState.CREATED: frozenset({SumState.VALIDATING}),
    SumState.VALIDATING: frozenset({SumState.FANNING_OUT, SumState.FAILED}),
    SumState.FANNING_OUT: frozenset({SumState.DEFERRING}),
    SumState.DEFERRING: frozenset({SumState.JOINING}),
    SumState.JOINING: frozenset({SumState.REDUCING, SumState.FAILED}),
    SumState.REDUCING: frozenset({SumState.COMPLETED, SumState.FAILED}),
    SumState.COMPLETED: frozenset(),  # terminal
    SumState.FAILED: frozenset(),  # terminal
}


def validate_sum_transition(current: SumState, target: SumState) -> None:
    """Raise :class:`InvalidTransitionError` if *current → target* is illegal.

    Example:
        >>> validate_sum_transition(SumState.JOINING, SumState.REDUCING)
        >>> validate_sum_transition(SumState.COMPLETED, SumState.JOINING)
        Traceback (most recent call last):
        ...
        InvalidTransitionError: Invalid SumState transition: completed → joining
    """
    allowed = SUM_VALID_TRANSITIONS.get(current, frozenset())
    if target not in allowed:
        raise InvalidTransitionError(current.value, target.value, "SumState")


@dataclass(frozen=True)
class RowResult:
    """The sum of one row, tagged with the row's position in the matrix."""

    index: int
    total: float
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "total": self.total, "size": self.size}


@dataclass(frozen=True)
class MatrixSumResult:
    """The total of a matrix plus the per-row results in input order."""

    total: float
    rows: tuple[RowResult, ...]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def to_dict(self) -> dict[str, Any]:
        """Serialise for logging."""
        return {
            "total": self.total,
            "row_count": self.row_count,
            "rows": [row.to_dict() for row in self.rows],
        }


@dataclass
class MatrixSumRun:
    """Record of one matrix-sum call.

    ``future`` resolves with the numeric total (or fails); ``result`` holds the
    full :class:`MatrixSumResult` once the run has completed.
    """

    future: asyncio.Future[float]
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    state: SumState = SumState.CREATED
    history: list[SumState] = field(default_factory=lambda: [SumState.CREATED])
    result: MatrixSumResult | None = None
    error: BaseException | None = None
    row_tasks: list[asyncio.Task] = field(default_factory=list, repr=False)
    join_task: asyncio.Task | None = field(default=None, repr=False)

    def transition_to(self, target: SumState) -> None:
        """Move to *target*, enforcing ``SUM_VALID_TRANSITIONS``."""
        validate_sum_transition(self.state, target)
        self.state = target
        self.history.append(target)

    def mark_failed(self, error: BaseException) -> None:
        self.transition_to(SumState.FAILED)
        self.error = error

    def mark_completed(self, result: MatrixSumResult) -> None:
        self.transition_to(SumState.COMPLETED)
        self.result = result

    @property
    def is_done(self) -> bool:
        return self.state.is_terminal


__all__ = [
    "SumState",
    "SUM_VALID_TRANSITIONS",
    "validate_sum_transition",
    "RowResult",
    "MatrixSumResult",
    "MatrixSumRun",
]
