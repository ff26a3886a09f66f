"""Tests for the scheduler seam."""

from __future__ import annotations

import asyncio

import pytest

from gridsum.execution.scheduler import EventLoopScheduler, Scheduler, get_default_scheduler


async def _record(log: list[str], name: str) -> str:
    log.append(name)
    return name


class TestEventLoopScheduler:
    """Tests for the asyncio-backed default scheduler."""

    def test_satisfies_protocol(self):
        assert isinstance(EventLoopScheduler(), Scheduler)

    def test_default_is_event_loop_scheduler(self):
        assert isinstance(get_default_scheduler(), EventLoopScheduler)
        assert get_default_scheduler() is get_default_scheduler()

    @pytest.mark.asyncio
    async def test_spawn_does_not_run_inline(self):
        log: list[str] = []
        task = EventLoopScheduler().spawn(_record(log, "a"), name="a")

        assert task.get_name() == "a"
        assert log == []
        assert await task == "a"
        assert log == ["a"]

    @pytest.mark.asyncio
    async def test_spawned_tasks_start_in_order(self):
        log: list[str] = []
        scheduler = EventLoopScheduler()
        tasks = [scheduler.spawn(_record(log, name), name=name) for name in "abc"]
        await asyncio.gather(*tasks)
        assert log == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_next_turn_yields_once(self):
        scheduler = EventLoopScheduler()
        log: list[str] = []

        async def _deferred():
            await scheduler.next_turn()
            log.append("deferred")

        async def _immediate():
            log.append("immediate")

        first = scheduler.spawn(_deferred())
        second = scheduler.spawn(_immediate())
        await asyncio.gather(first, second)

        assert log == ["immediate", "deferred"]

    def test_repr(self):
        assert repr(EventLoopScheduler()) == "EventLoopScheduler()"
