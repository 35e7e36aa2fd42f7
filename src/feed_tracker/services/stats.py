"""Statistics over the feeding history."""

from collections import Counter
from dataclasses import dataclass
from datetime import date
from zoneinfo import ZoneInfo

from feed_tracker.domain.feeding import FeedingRecord, FeedingSide, History
from feed_tracker.domain.stats import DailySummary, MonthlySummary
from feed_tracker.services.formatting import local_date


@dataclass
class StatsService:
    """Computes daily and monthly summaries in a fixed timezone."""

    timezone_name: str = "UTC"

    def daily(self, history: History, now_ms: int) -> DailySummary:
        """Return today's totals."""
        today = local_date(now_ms, ZoneInfo(self.timezone_name))
        records = self.today_records(history, now_ms)
        feeds = [
            session
            for record in records
            for session in record.sessions
            if session.duration_seconds > 0
        ]
        left = sum(f.duration_seconds for f in feeds if f.side is FeedingSide.LEFT)
        right = sum(f.duration_seconds for f in feeds if f.side is FeedingSide.RIGHT)
        return DailySummary(
            day=today,
            total_feeds=len(records),
            total_seconds=left + right,
            left_seconds=left,
            right_seconds=right,
        )

    def monthly(self, history: History, now_ms: int) -> MonthlySummary:
        """Return totals for the current calendar month."""
        tz = ZoneInfo(self.timezone_name)
        today = local_date(now_ms, tz)
        by_day: Counter[date] = Counter()
        for record in history:
            day = local_date(record.end_time, tz)
            if (day.year, day.month) == (today.year, today.month):
                by_day[day] += 1
        total = sum(by_day.values())
        average = round(total / len(by_day), 1) if by_day else 0.0
        return MonthlySummary(
            year=today.year,
            month=today.month,
            total_feeds=total,
            days_with_feeds=len(by_day),
            average_per_day=average,
            feeds_by_day=dict(sorted(by_day.items())),
        )

    def today_records(self, history: History, now_ms: int) -> list[FeedingRecord]:
        """Return records that ended today, newest first."""
        tz = ZoneInfo(self.timezone_name)
        today = local_date(now_ms, tz)
        return [
            record for record in history if local_date(record.end_time, tz) == today
        ]
