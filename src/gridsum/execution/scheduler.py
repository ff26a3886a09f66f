"""Cooperative scheduler seam: spawn tasks and yield scheduler turns.

WHY
───
Every deferral in gridsum is an explicit, named step rather than a sleep:
row tasks start on a later loop turn, and the matrix join waits exactly one
turn before joining.  Routing both through a :class:`Scheduler` lets tests
count and order those steps without real-time waits.

ARCHITECTURE
────────────
::

    Scheduler (protocol)
      ├── .spawn(coro, name)  ─ enqueue a coroutine as a Task (never runs inline)
      └── .next_turn()        ─ suspend the caller for exactly one loop turn

    EventLoopScheduler
      spawn     → loop.create_task
      next_turn → asyncio.sleep(0)

``asyncio`` runs ready callbacks in FIFO order, so tasks spawned in row order
take their first step in row order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class Scheduler(Protocol):
    """What gridsum needs from a cooperative scheduler."""

    def spawn(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        """Queue *coro* to start on a later turn and return its task."""
        ...

    async def next_turn(self) -> None:
        """Suspend the current task for one scheduler turn."""
        ...


class EventLoopScheduler:
    """Default scheduler backed by the running asyncio event loop."""

    def spawn(self, coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
        loop = asyncio.get_running_loop()
        return loop.create_task(coro, name=name)

    async def next_turn(self) -> None:
        await asyncio.sleep(0)

    def __repr__(self) -> str:
        return "EventLoopScheduler()"


_default_scheduler: Scheduler = EventLoopScheduler()


def get_default_scheduler() -> Scheduler:
    """Return the scheduler used when none is injected."""
    return _default_scheduler


__all__ = ["Scheduler", "EventLoopScheduler", "get_default_scheduler"]
