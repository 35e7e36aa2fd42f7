"""Cancellable one-shot timers."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class Scheduler(Protocol):
    """Runs a callback once after a delay."""

    def after(self, delay_ms: int, callback: Callable[[], None]) -> object:
        """Schedule ``callback`` and return a handle for ``cancel``."""

    def cancel(self, handle: object) -> None:
        """Cancel a scheduled callback; cancelling twice is harmless."""


@dataclass
class AsyncioScheduler(Scheduler):
    """Scheduler backed by the running asyncio event loop."""

    def after(self, delay_ms: int, callback: Callable[[], None]) -> object:
        """Schedule ``callback`` on the running loop."""
        loop = asyncio.get_running_loop()
        return loop.call_later(max(delay_ms, 0) / 1000, callback)

    def cancel(self, handle: object) -> None:
        """Cancel a timer handle returned by ``after``."""
        if isinstance(handle, asyncio.TimerHandle):
            handle.cancel()
