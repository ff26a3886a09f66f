"""
Shared pytest fixtures and configuration for gridsum tests.

This module provides:
- structlog reset between tests so log capture is isolated
- RecordingScheduler, a scheduler that records spawns and turns and can hold
  chosen tasks back for extra turns
- Sample matrices

Usage:
    async def test_something(recording_scheduler):
        summer = MatrixSummer(recording_scheduler)
        ...
"""

import asyncio
import sys
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, Generator

import pytest
import structlog

# Ensure gridsum package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridsum.execution.scheduler import EventLoopScheduler


# =============================================================================
# Scheduler Test Double
# =============================================================================


class RecordingScheduler(EventLoopScheduler):
    """EventLoopScheduler that records what was spawned and who yielded.

    ``extra_turns`` maps a task name to additional turns that task waits
    whenever it calls :meth:`next_turn`, to slow one row down deterministically.
    """

    def __init__(self, extra_turns: dict[str, int] | None = None) -> None:
        self.spawned: list[str | None] = []
        self.turns: list[str] = []
        self.extra_turns = extra_turns or {}

    def spawn(self, coro: Coroutine[Any, Any, Any], *, name: str | None = None) -> asyncio.Task:
        self.spawned.append(name)
        return super().spawn(coro, name=name)

    async def next_turn(self) -> None:
        name = asyncio.current_task().get_name()
        self.turns.append(name)
        for _ in range(1 + self.extra_turns.get(name, 0)):
            await asyncio.sleep(0)

    def turns_of(self, name: str) -> int:
        return self.turns.count(name)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Restore structlog defaults and clear bound context around each test."""
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def recording_scheduler() -> RecordingScheduler:
    return RecordingScheduler()


@pytest.fixture
def square_matrix() -> list[list[int]]:
    """3x3 matrix of 1..9, total 45."""
    return [
        [1, 2, 3],
        [4, 5, 6],
        [7, 8, 9],
    ]


@pytest.fixture
def scheduler_factory() -> type[RecordingScheduler]:
    """Build a RecordingScheduler with custom ``extra_turns``."""
    return RecordingScheduler
