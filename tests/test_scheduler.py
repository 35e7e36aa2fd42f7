"""Tests for the asyncio-backed scheduler."""

import asyncio

from feed_tracker.services.scheduler import AsyncioScheduler


def test_scheduled_callback_fires() -> None:
    fired: list[str] = []

    async def run() -> None:
        scheduler = AsyncioScheduler()
        scheduler.after(10, lambda: fired.append("a"))
        await asyncio.sleep(0.05)

    asyncio.run(run())

    assert fired == ["a"]


def test_cancelled_callback_does_not_fire() -> None:
    fired: list[str] = []

    async def run() -> None:
        scheduler = AsyncioScheduler()
        scheduler.after(10, lambda: fired.append("kept"))
        handle = scheduler.after(10, lambda: fired.append("cancelled"))
        scheduler.cancel(handle)
        scheduler.cancel(handle)
        await asyncio.sleep(0.05)

    asyncio.run(run())

    assert fired == ["kept"]


def test_negative_delay_fires_on_next_iteration() -> None:
    fired: list[str] = []

    async def run() -> None:
        AsyncioScheduler().after(-100, lambda: fired.append("late"))
        await asyncio.sleep(0.01)

    asyncio.run(run())

    assert fired == ["late"]


def test_cancel_ignores_foreign_handles() -> None:
    AsyncioScheduler().cancel(None)
    AsyncioScheduler().cancel(42)
