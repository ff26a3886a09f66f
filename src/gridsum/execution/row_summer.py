"""Row summation as a deferred computation.

A submitted row never sums in the calling turn: the work is spawned as a task
and its first action is to yield one scheduler turn.  Once resumed it walks
the row, accumulating from 0, and completes with the total.  A submitted row
task cannot fail; bad input is rejected by :func:`validate_row` before
anything is scheduled.
"""

from __future__ import annotations

import asyncio
import numbers
from collections.abc import Iterable

from gridsum.core.errors import ErrorContext, RowValueError, ValidationError
from gridsum.core.logging import get_logger
from gridsum.execution.scheduler import Scheduler, get_default_scheduler

logger = get_logger(__name__)


def validate_row(row: Iterable[numbers.Number], index: int) -> tuple[numbers.Number, ...]:
    """Materialise *row* and check every element is a number.

    Raises:
        ValidationError: if *row* is not iterable.
        RowValueError: for the first element that is not a number
            (``bool`` included, despite being an ``int`` subclass).
    """
    try:
        values = tuple(row)
    except TypeError as exc:
        raise ValidationError(
            f"Row {index} is not a sequence of numbers",
            field=f"matrix[{index}]",
            value=row,
            context=ErrorContext(row_index=index),
            cause=exc,
        ) from exc
    for column, value in enumerate(values):
        if isinstance(value, bool) or not isinstance(value, numbers.Number):
            raise RowValueError(index, column, value)
    return values


class RowSummer:
    """Sums single rows on a later scheduler turn."""

    def __init__(self, scheduler: Scheduler | None = None) -> None:
        self._scheduler = scheduler or get_default_scheduler()

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    def submit(self, row: Iterable[numbers.Number], index: int) -> asyncio.Task:
        """Schedule the sum of *row* and return the task that will hold it.

        Args:
            row: Numbers to add. May be empty.
            index: The row's position in its matrix, used for the task name
                and log events only.

        Returns:
            Task named ``row-<index>`` resolving to the row total.
        """
        values = validate_row(row, index)
        return self._scheduler.spawn(self._compute(values, index), name=f"row-{index}")

    async def _compute(self, values: tuple[numbers.Number, ...], index: int) -> numbers.Number:
        await self._scheduler.next_turn()

        row_sum = 0
        for value in values:
            logger.debug("row_sum.add", row=index, value=value)
            row_sum += value
        logger.debug("row_sum.computed", row=index, total=row_sum)
        return row_sum


def sum_row(
    row: Iterable[numbers.Number],
    index: int = 0,
    *,
    scheduler: Scheduler | None = None,
) -> asyncio.Task:
    """Shortcut for ``RowSummer(scheduler).submit(row, index)``."""
    return RowSummer(scheduler).submit(row, index)


__all__ = ["RowSummer", "sum_row", "validate_row"]
