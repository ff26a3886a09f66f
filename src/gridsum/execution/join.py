"""Fail-fast join over an ordered collection of tasks.

Results come back positionally, in the order the tasks were given, no matter
which task finished first.  The first failure wins: the join raises it as soon
as it is seen and stops waiting on the rest.  Abandoned tasks keep running
(nothing is cancelled); a done-callback retrieves their eventual exception so
it is logged instead of reported as "never retrieved".
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TypeVar

from gridsum.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _failed(task: asyncio.Task) -> bool:
    return task.done() and (task.cancelled() or task.exception() is not None)


def _observe_abandoned(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("join.abandoned_failure", task=task.get_name(), error=str(exc))


async def join_fail_fast(tasks: Sequence[asyncio.Task[T]]) -> list[T]:
    """Wait for every task and return their results in input order.

    Args:
        tasks: Tasks to join. Order defines the order of the returned list.

    Returns:
        ``[task.result() for task in tasks]``

    Raises:
        Exception: The first failure observed. When several tasks are found
            failed at the same wake-up, the one earliest in *tasks* wins.
    """
    tasks = list(tasks)
    pending = {task for task in tasks if not task.done()}

    while True:
        failed = next((task for task in tasks if _failed(task)), None)
        if failed is not None:
            for task in tasks:
                if task is failed:
                    continue
                if task.done():
                    _observe_abandoned(task)
                else:
                    task.add_done_callback(_observe_abandoned)
            if failed.cancelled():
                raise asyncio.CancelledError(f"{failed.get_name()} was cancelled")
            raise failed.exception()

        if not pending:
            break
        _, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_EXCEPTION)

    return [task.result() for task in tasks]


__all__ = ["join_fail_fast"]
