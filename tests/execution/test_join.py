"""Tests for join_fail_fast: positional results, first failure wins."""

from __future__ import annotations

import asyncio

import pytest
from structlog.testing import capture_logs

from gridsum.execution.join import join_fail_fast


# ── Helpers ──────────────────────────────────────────────────────────────


async def _after(turns: int, value):
    for _ in range(turns):
        await asyncio.sleep(0)
    return value


async def _fail_after(turns: int, message: str):
    for _ in range(turns):
        await asyncio.sleep(0)
    raise ValueError(message)


def _spawn(coro, name):
    return asyncio.get_running_loop().create_task(coro, name=name)


class TestJoinFailFast:
    """Tests for the fail-fast join."""

    @pytest.mark.asyncio
    async def test_empty(self):
        assert await join_fail_fast([]) == []

    @pytest.mark.asyncio
    async def test_results_in_input_order(self):
        tasks = [
            _spawn(_after(3, "a"), "a"),
            _spawn(_after(0, "b"), "b"),
            _spawn(_after(1, "c"), "c"),
        ]
        assert await join_fail_fast(tasks) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_already_done_tasks(self):
        tasks = [_spawn(_after(0, n), f"t{n}") for n in range(3)]
        await asyncio.sleep(0)
        assert all(task.done() for task in tasks)
        assert await join_fail_fast(tasks) == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_raises_first_failure(self):
        tasks = [
            _spawn(_after(0, 1), "ok"),
            _spawn(_fail_after(1, "boom"), "bad"),
        ]
        with pytest.raises(ValueError, match="boom"):
            await join_fail_fast(tasks)

    @pytest.mark.asyncio
    async def test_does_not_wait_for_pending(self):
        release = asyncio.Event()

        async def _blocked():
            await release.wait()
            return "late"

        slow = _spawn(_blocked(), "slow")
        tasks = [slow, _spawn(_fail_after(0, "fast"), "fast")]

        with pytest.raises(ValueError, match="fast"):
            await join_fail_fast(tasks)

        assert not slow.done()
        assert not slow.cancelled()
        release.set()
        assert await slow == "late"

    @pytest.mark.asyncio
    async def test_earliest_position_wins_on_same_turn(self):
        tasks = [
            _spawn(_after(0, "ok"), "ok"),
            _spawn(_fail_after(1, "second"), "second"),
            _spawn(_fail_after(1, "first"), "first"),
        ]
        # swap so the task listed first among failures is "first"
        tasks[1], tasks[2] = tasks[2], tasks[1]

        with pytest.raises(ValueError, match="first"):
            await join_fail_fast(tasks)

    @pytest.mark.asyncio
    async def test_abandoned_failure_is_logged(self):
        release = asyncio.Event()

        async def _blocked_fail():
            await release.wait()
            raise RuntimeError("later")

        abandoned = _spawn(_blocked_fail(), "abandoned")
        tasks = [_spawn(_fail_after(0, "now"), "now"), abandoned]

        with capture_logs() as logs:
            with pytest.raises(ValueError):
                await join_fail_fast(tasks)
            release.set()
            await asyncio.sleep(0)
            await asyncio.sleep(0)

        assert abandoned.done()
        warnings = [entry for entry in logs if entry["event"] == "join.abandoned_failure"]
        assert len(warnings) == 1
        assert warnings[0]["task"] == "abandoned"
        assert warnings[0]["error"] == "later"

    @pytest.mark.asyncio
    async def test_cancelled_task_cancels_join(self):
        victim = _spawn(_after(5, "never"), "victim")
        tasks = [victim, _spawn(_after(1, "ok"), "ok")]
        victim.cancel()

        with pytest.raises(asyncio.CancelledError):
            await join_fail_fast(tasks)
