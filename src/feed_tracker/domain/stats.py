"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailySummary:
    """Feeding totals for a single day."""

    day: date
    total_feeds: int
    total_seconds: int
    left_seconds: int
    right_seconds: int


@dataclass(frozen=True)
class MonthlySummary:
    """Feeding totals for a calendar month."""

    year: int
    month: int
    total_feeds: int
    days_with_feeds: int
    average_per_day: float
    feeds_by_day: dict[date, int]
