"""Next-feed reminder scheduling."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from feed_tracker.services.feeding import Clock
from feed_tracker.services.scheduler import Scheduler

REMINDER_TITLE = "Time for the next feed!"
REMINDER_BODY = "Your reminder is going off."

_logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Delivers a user-facing notification."""

    def notify(self, title: str, body: str) -> None:
        """Show a notification."""


class ReminderError(ValueError):
    """Raised when a reminder cannot be set."""


@dataclass(frozen=True)
class Reminder:
    """An armed reminder."""

    fire_at: int
    delay_ms: int


@dataclass
class ReminderService:
    """Keeps at most one reminder measured from the end of the last feed."""

    clock: Clock
    scheduler: Scheduler
    notifier: Notifier
    active: Reminder | None = None
    _handle: object | None = field(default=None, init=False, repr=False)

    def set_reminder(
        self, last_feed_end_time: int | None, hours: int, minutes: int
    ) -> Reminder:
        """Arm a reminder ``hours``/``minutes`` after the last feed ended."""
        if last_feed_end_time is None:
            raise ReminderError("No feed has been logged yet.")
        if hours < 0 or minutes < 0:
            raise ReminderError("Please enter a valid duration.")
        total_ms = (hours * 3600 + minutes * 60) * 1000
        if total_ms <= 0:
            raise ReminderError("Please enter a valid duration.")
        fire_at = last_feed_end_time + total_ms
        delay_ms = fire_at - self.clock.now_ms()
        if delay_ms <= 0:
            raise ReminderError("The calculated reminder time is in the past.")

        self.clear_reminder()
        self._handle = self.scheduler.after(delay_ms, self._fire)
        self.active = Reminder(fire_at=fire_at, delay_ms=delay_ms)
        _logger.info("Reminder set: fire_at=%s delay_ms=%s", fire_at, delay_ms)
        return self.active

    def clear_reminder(self) -> None:
        """Cancel the active reminder, if any."""
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
        self._handle = None
        self.active = None

    def _fire(self) -> None:
        self._handle = None
        self.active = None
        self.notifier.notify(REMINDER_TITLE, REMINDER_BODY)
