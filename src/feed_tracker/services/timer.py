"""Timer for an in-progress single-side feed."""

from dataclasses import dataclass

from feed_tracker.domain.feeding import FeedingSide, SingleFeed
from feed_tracker.services.feeding import Clock


class TimerStateError(RuntimeError):
    """Raised when a timer transition is not valid from the current state."""


@dataclass
class SessionTimer:
    """Tracks one active side at a time, independent of the history."""

    clock: Clock
    active_side: FeedingSide | None = None
    started_at: int | None = None

    @property
    def is_active(self) -> bool:
        return self.active_side is not None

    def elapsed_seconds(self) -> int:
        """Return whole seconds since the active feed started."""
        if self.started_at is None:
            return 0
        return max(self.clock.now_ms() - self.started_at, 0) // 1000

    def start(self, side: FeedingSide) -> None:
        """Start timing ``side``; only valid while idle."""
        if self.is_active:
            raise TimerStateError(f"{self.active_side.value} side is already active")
        self.active_side = side
        self.started_at = self.clock.now_ms()

    def stop(self) -> SingleFeed | None:
        """Stop the active side and return the feed, or None if under a second."""
        if self.active_side is None:
            raise TimerStateError("No side is active")
        side = self.active_side
        duration = self.elapsed_seconds()
        self.active_side = None
        self.started_at = None
        if duration <= 0:
            return None
        return SingleFeed(
            side=side, duration_seconds=duration, end_time=self.clock.now_ms()
        )

    def tap(self, side: FeedingSide) -> SingleFeed | None:
        """Apply a side button press.

        Pressing the active side stops it, pressing any side while idle starts
        it, and pressing the other side while one is running does nothing.
        """
        if self.active_side == side:
            return self.stop()
        if not self.is_active:
            self.start(side)
        return None
