"""gridsum execution: deferred row sums joined into a matrix total.

MODULE MAP (recommended reading order)
──────────────────────────────────────
  1. scheduler.py      ─ Scheduler protocol + EventLoopScheduler
  2. models.py         ─ RowResult, MatrixSumResult, SumState, MatrixSumRun
  3. row_summer.py     ─ RowSummer: one row, summed on a later turn
  4. join.py           ─ join_fail_fast: positional results, first failure wins
  5. matrix_summer.py  ─ MatrixSummer: validate → fan out → defer → join → reduce
"""

from gridsum.execution.join import join_fail_fast
from gridsum.execution.matrix_summer import MatrixSummer, asum_matrix, sum_matrix
from gridsum.execution.models import (
    SUM_VALID_TRANSITIONS,
    MatrixSumResult,
    MatrixSumRun,
    RowResult,
    SumState,
    validate_sum_transition,
)
from gridsum.execution.row_summer import RowSummer, sum_row, validate_row
from gridsum.execution.scheduler import EventLoopScheduler, Scheduler, get_default_scheduler

__all__ = [
    # scheduling
    "Scheduler",
    "EventLoopScheduler",
    "get_default_scheduler",
    # models
    "SumState",
    "SUM_VALID_TRANSITIONS",
    "validate_sum_transition",
    "RowResult",
    "MatrixSumResult",
    "MatrixSumRun",
    # summers
    "RowSummer",
    "sum_row",
    "validate_row",
    "join_fail_fast",
    "MatrixSummer",
    "sum_matrix",
    "asum_matrix",
]
