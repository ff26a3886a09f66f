"""Matrix summation: fan out one row task per row, defer, join, reduce.

WHY
───
This is the deferred-aggregation walk-through in one place: each row is an
independent deferred computation, and the aggregation itself waits one
scheduler turn before joining.  That extra turn never changes the total, but
it does change where the join lands relative to other queued work, which is
what the explicit :meth:`Scheduler.next_turn` call makes observable.

ARCHITECTURE
────────────
::

    MatrixSummer.submit(matrix) ──► MatrixSumRun
      │  CREATED → VALIDATING
      │     ├── empty / non-numeric ──► FAILED, run.future already failed
      │     ▼
      │  FANNING_OUT   RowSummer.submit(row, i) for each row, in order
      │     ▼
      └── join task (spawned)
            DEFERRING  await scheduler.next_turn()   (exactly once)
            JOINING    join_fail_fast(row_tasks)     (first failure wins)
            REDUCING   total = 0 + row_0 + row_1 + ...
            (JOINING or REDUCING raises) ──► FAILED, run.future fails
            COMPLETED  run.future.set_result(total)

Two calling styles, same failure:

    future = summer.sum_matrix(matrix)   # already failed for [] on return
    total = await summer.sum(matrix)     # raises EmptyMatrixError for []

A rejected future that nobody awaits or inspects is reported by asyncio as
"Future exception was never retrieved" when it is garbage collected.  Callers
that may drop the future should prefer the coroutine form.

Example::

    summer = MatrixSummer()
    run = summer.submit([[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    assert await run.future == 45
    assert [r.total for r in run.result.rows] == [6, 15, 24]
"""

from __future__ import annotations

import asyncio
import numbers
from collections.abc import Iterable

from gridsum.core.errors import EmptyMatrixError, GridSumError, ValidationError
from gridsum.core.logging import LogContext, get_logger
from gridsum.execution.join import join_fail_fast
from gridsum.execution.models import MatrixSumResult, MatrixSumRun, RowResult, SumState
from gridsum.execution.row_summer import RowSummer, validate_row
from gridsum.execution.scheduler import Scheduler, get_default_scheduler

logger = get_logger(__name__)

Matrix = Iterable[Iterable[numbers.Number]]


class MatrixSummer:
    """Sums a matrix by fanning out one :class:`RowSummer` task per row.

    Parameters
    ----------
    scheduler : Scheduler, optional
        Cooperative scheduler used for every spawn and deferral
        (default :class:`EventLoopScheduler`).
    row_summer : RowSummer, optional
        Row summer to fan out to; defaults to one sharing ``scheduler``.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        row_summer: RowSummer | None = None,
    ) -> None:
        self._scheduler = scheduler or get_default_scheduler()
        self._row_summer = row_summer or RowSummer(self._scheduler)

    # ── Submission ───────────────────────────────────────────────────

    def submit(self, matrix: Matrix) -> MatrixSumRun:
        """Start summing *matrix* and return the run tracking it.

        Must be called from a coroutine (needs the running loop).  Invalid
        input never raises here: the returned run is already ``FAILED`` and
        its future already holds the error.  A failure while joining or
        reducing (a Decimal row next to a float row, say) fails the future
        the same way.
        """
        loop = asyncio.get_running_loop()
        run = MatrixSumRun(future=loop.create_future())

        with LogContext(run_id=run.run_id):
            logger.info("matrix_sum.called")
            run.transition_to(SumState.VALIDATING)
            try:
                rows = self._validate(matrix)
            except ValidationError as exc:
                exc.with_context(run_id=run.run_id)
                logger.warning("matrix_sum.rejected", **exc.to_dict())
                run.mark_failed(exc)
                run.future.set_exception(exc)
                return run

            run.transition_to(SumState.FANNING_OUT)
            logger.debug("matrix_sum.fan_out", rows=len(rows))
            run.row_tasks = [
                self._row_summer.submit(row, index) for index, row in enumerate(rows)
            ]
            run.join_task = self._scheduler.spawn(
                self._join(run, [len(row) for row in rows]),
                name=f"matrix-sum-{run.run_id}",
            )
            run.join_task.add_done_callback(lambda task: self._on_join_done(run, task))

        return run

    def sum_matrix(self, matrix: Matrix) -> asyncio.Future:
        """Return a future resolving to the total of *matrix*."""
        return self.submit(matrix).future

    async def sum(self, matrix: Matrix) -> numbers.Number:
        """Sum *matrix* and return the total.

        Raises:
            EmptyMatrixError: If *matrix* has no rows.
            RowValueError: If a row holds something that is not a number.
            ValidationError: If *matrix* or one of its rows is not iterable.
        """
        return await self.submit(matrix).future

    # ── Steps ────────────────────────────────────────────────────────

    def _validate(self, matrix: Matrix) -> list[tuple[numbers.Number, ...]]:
        try:
            rows = iter(matrix)
        except TypeError as exc:
            raise ValidationError(
                "Matrix is not a sequence of rows",
                field="matrix",
                value=matrix,
                cause=exc,
            ) from exc
        validated = [validate_row(row, index) for index, row in enumerate(rows)]
        if not validated:
            raise EmptyMatrixError()
        return validated

    async def _join(self, run: MatrixSumRun, sizes: list[int]) -> None:
        run.transition_to(SumState.DEFERRING)
        await self._scheduler.next_turn()

        run.transition_to(SumState.JOINING)
        try:
            totals = await join_fail_fast(run.row_tasks)
        except Exception as exc:
            self._fail(run, exc)
            return

        run.transition_to(SumState.REDUCING)
        try:
            total = 0
            for value in totals:
                total += value
            result = MatrixSumResult(
                total=total,
                rows=tuple(
                    RowResult(index=index, total=value, size=size)
                    for index, (value, size) in enumerate(zip(totals, sizes))
                ),
            )
        except Exception as exc:
            # mixed numeric types can refuse to add, e.g. Decimal + float
            self._fail(run, exc)
            return

        run.mark_completed(result)
        logger.info("matrix_sum.completed", total=total, rows=result.row_count)
        run.future.set_result(total)

    @staticmethod
    def _fail(run: MatrixSumRun, exc: Exception) -> None:
        if isinstance(exc, GridSumError):
            exc.with_context(run_id=run.run_id)
        logger.error(
            "matrix_sum.failed",
            state=run.state.value,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        run.mark_failed(exc)
        run.future.set_exception(exc)

    @staticmethod
    def _on_join_done(run: MatrixSumRun, task: asyncio.Task) -> None:
        if run.future.done():
            return
        if task.cancelled():
            run.future.cancel()
        elif task.exception() is not None:
            # the join task died outside its own failure handling
            run.future.set_exception(task.exception())


# ── Module-level shortcuts ───────────────────────────────────────────


def sum_matrix(matrix: Matrix, *, scheduler: Scheduler | None = None) -> asyncio.Future:
    """Return a future for the total of *matrix*.

    For an empty matrix the future is already failed with
    :class:`EmptyMatrixError` when this returns.  Retrieve its exception
    (await it, or call ``exception()``) to keep asyncio from warning that it
    was never retrieved.
    """
    return MatrixSummer(scheduler).sum_matrix(matrix)


async def asum_matrix(matrix: Matrix, *, scheduler: Scheduler | None = None) -> numbers.Number:
    """Coroutine form of :func:`sum_matrix`; raises instead of returning a failed future."""
    return await MatrixSummer(scheduler).sum(matrix)


__all__ = ["MatrixSummer", "sum_matrix", "asum_matrix"]
