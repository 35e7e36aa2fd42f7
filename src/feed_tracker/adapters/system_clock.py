"""Wall-clock time source."""

import time
from dataclasses import dataclass

from feed_tracker.services.feeding import Clock


@dataclass
class SystemClock(Clock):
    """Clock reading the system time."""

    def now_ms(self) -> int:
        """Return the current epoch time in milliseconds."""
        return time.time_ns() // 1_000_000
