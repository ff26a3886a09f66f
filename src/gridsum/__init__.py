"""
gridsum - Asynchronous row-then-matrix summation on a cooperative scheduler.

Each row of a matrix is summed as an independent deferred computation; the
matrix total joins them fail-fast after deferring one scheduler turn.

- gridsum.core: errors, structured logging, settings
- gridsum.execution: scheduler seam, row / matrix summers, run models
"""

__version__ = "0.1.0"

from gridsum.core import (
    EmptyMatrixError,
    GridSumError,
    GridSumSettings,
    LogContext,
    RowValueError,
    configure_logging,
    get_logger,
)
from gridsum.execution import (
    EventLoopScheduler,
    MatrixSumResult,
    MatrixSummer,
    MatrixSumRun,
    RowResult,
    RowSummer,
    Scheduler,
    SumState,
    asum_matrix,
    sum_matrix,
    sum_row,
)

__all__ = [
    "__version__",
    "MatrixSummer",
    "RowSummer",
    "sum_matrix",
    "asum_matrix",
    "sum_row",
    "Scheduler",
    "EventLoopScheduler",
    "MatrixSumRun",
    "MatrixSumResult",
    "RowResult",
    "SumState",
    "GridSumError",
    "EmptyMatrixError",
    "RowValueError",
    "GridSumSettings",
    "configure_logging",
    "get_logger",
    "LogContext",
]
