"""Display helpers for durations and the history log."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

from feed_tracker.domain.feeding import FeedingRecord

SECONDS_PER_HOUR = 3600
MS_PER_MINUTE = 60_000


def local_date(epoch_ms: int, tz: ZoneInfo) -> date:
    """Return the calendar date of an epoch-millisecond instant in ``tz``."""
    return datetime.fromtimestamp(epoch_ms / 1000, tz=UTC).astimezone(tz).date()


def format_duration(seconds: int) -> str:
    """Format seconds as MM:SS, or HH:MM:SS once an hour is reached."""
    hours, remainder = divmod(max(seconds, 0), SECONDS_PER_HOUR)
    minutes, secs = divmod(remainder, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def format_time_since(milliseconds: int) -> str:
    """Describe an elapsed gap, empty when negative or under a minute."""
    if milliseconds < 0:
        return ""
    total_minutes = milliseconds // MS_PER_MINUTE
    if total_minutes < 1:
        return ""
    hours, minutes = divmod(total_minutes, 60)
    parts = []
    if hours > 0:
        parts.append(f"{hours} hour{'s' if hours > 1 else ''}")
    if minutes > 0:
        parts.append(f"{minutes} minute{'s' if minutes > 1 else ''}")
    return " ".join(parts)


def day_label(day: date, today: date) -> str:
    """Return "Today", "Yesterday" or a long weekday/month label."""
    if day == today:
        return "Today"
    if day == today - timedelta(days=1):
        return "Yesterday"
    return f"{day:%A}, {day:%B} {day.day}"


def group_by_day(
    records: tuple[FeedingRecord, ...], tz: ZoneInfo
) -> dict[date, list[FeedingRecord]]:
    """Group records by local end date; days newest first, order kept within."""
    grouped: dict[date, list[FeedingRecord]] = {}
    for record in records:
        grouped.setdefault(local_date(record.end_time, tz), []).append(record)
    return dict(sorted(grouped.items(), reverse=True))
