"""Domain models for feeding sessions."""

from dataclasses import dataclass
from enum import Enum


class FeedingSide(str, Enum):
    """Breast side used for a single feed."""

    LEFT = "Left"
    RIGHT = "Right"

    @property
    def opposite(self) -> "FeedingSide":
        return FeedingSide.RIGHT if self is FeedingSide.LEFT else FeedingSide.LEFT


@dataclass(frozen=True)
class SingleFeed:
    """One uninterrupted nursing interval on one side."""

    side: FeedingSide
    duration_seconds: int
    end_time: int

    @property
    def start_time(self) -> int:
        """Derived start instant in epoch milliseconds."""
        return self.end_time - self.duration_seconds * 1000


@dataclass(frozen=True)
class FeedingRecord:
    """A feeding event made of one (pending) or two (complete) single feeds."""

    id: str
    sessions: tuple[SingleFeed, ...]
    end_time: int

    @property
    def is_pending(self) -> bool:
        return len(self.sessions) == 1

    @property
    def is_complete(self) -> bool:
        return len(self.sessions) == 2  # noqa: PLR2004


History = tuple[FeedingRecord, ...]
"""Feeding records ordered newest first."""
