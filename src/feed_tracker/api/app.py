"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from zoneinfo import ZoneInfo

from fastapi import FastAPI, HTTPException, Request, status

from feed_tracker.api.models import ReminderRequest
from feed_tracker.app_logging import configure_logging
from feed_tracker.containers import AppContainer
from feed_tracker.domain.feeding import FeedingRecord, FeedingSide, SingleFeed
from feed_tracker.domain.stats import DailySummary, MonthlySummary
from feed_tracker.services.formatting import (
    day_label,
    format_duration,
    format_time_since,
    group_by_day,
    local_date,
)
from feed_tracker.services.reminders import Reminder, ReminderError
from feed_tracker.services.timer import SessionTimer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        history = app.state.container.feeding_service.load()
        logger.info("Loaded feeding history: records=%s", len(history))
        yield
        app.state.container.reminder_service.clear_reminder()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/timer")
    async def timer_state(request: Request) -> dict[str, object]:
        """Return the active side and elapsed time."""
        state_container: AppContainer = request.app.state.container
        return _timer_payload(state_container.session_timer)

    @app.post("/timer/{side}/tap")
    async def tap_side(side: FeedingSide, request: Request) -> dict[str, object]:
        """Press a side button: start, stop, or ignore while the other runs."""
        state_container: AppContainer = request.app.state.container
        feed = state_container.session_timer.tap(side)
        payload = _timer_payload(state_container.session_timer)
        payload["feed"] = None
        payload["warning"] = None
        if feed is not None:
            update = state_container.feeding_service.add_finished_feed(feed)
            payload["feed"] = _feed_payload(feed)
            payload["warning"] = update.warning
        return payload

    @app.get("/history")
    async def history(request: Request) -> dict[str, object]:
        """Return feeding records grouped by day."""
        state_container: AppContainer = request.app.state.container
        records = state_container.feeding_service.chronological()
        tz = ZoneInfo(state_container.settings.timezone)
        today = local_date(state_container.clock.now_ms(), tz)
        previous_end = {
            record.id: records[index - 1].end_time if index > 0 else None
            for index, record in enumerate(records)
        }
        days = [
            {
                "date": day.isoformat(),
                "label": day_label(day, today),
                "records": [
                    _record_payload(record, previous_end[record.id])
                    for record in day_records
                ],
            }
            for day, day_records in group_by_day(records, tz).items()
        ]
        return {
            "days": days,
            "last_feed_end_time": state_container.feeding_service.last_feed_end_time(),
        }

    @app.delete("/history")
    async def clear_history(request: Request) -> dict[str, object]:
        """Clear all feeding records unless a feed is being timed."""
        state_container: AppContainer = request.app.state.container
        if state_container.session_timer.is_active:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Stop the active feed before clearing history.",
            )
        update = state_container.feeding_service.clear()
        logger.info("Feeding history cleared")
        return {"status": "ok", "warning": update.warning}

    @app.get("/stats/daily")
    async def daily_stats(request: Request) -> dict[str, object]:
        """Return today's feeding totals."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.stats_service.daily(
            state_container.feeding_service.history,
            state_container.clock.now_ms(),
        )
        return _daily_payload(summary)

    @app.get("/stats/monthly")
    async def monthly_stats(request: Request) -> dict[str, object]:
        """Return this month's feeding totals."""
        state_container: AppContainer = request.app.state.container
        summary = state_container.stats_service.monthly(
            state_container.feeding_service.history,
            state_container.clock.now_ms(),
        )
        return _monthly_payload(summary)

    @app.get("/reminders")
    async def get_reminder(request: Request) -> dict[str, object]:
        """Return the active reminder, if any."""
        state_container: AppContainer = request.app.state.container
        reminder = state_container.reminder_service.active
        return {"reminder": _reminder_payload(reminder)}

    @app.post("/reminders")
    async def set_reminder(
        body: ReminderRequest, request: Request
    ) -> dict[str, object]:
        """Arm a reminder relative to the end of the last feed."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        hours = settings.default_reminder_hours if body.hours is None else body.hours
        minutes = (
            settings.default_reminder_minutes if body.minutes is None else body.minutes
        )
        try:
            reminder = state_container.reminder_service.set_reminder(
                state_container.feeding_service.last_feed_end_time(), hours, minutes
            )
        except ReminderError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        return {"reminder": _reminder_payload(reminder)}

    @app.delete("/reminders")
    async def clear_reminder(request: Request) -> dict[str, str]:
        """Cancel the active reminder."""
        state_container: AppContainer = request.app.state.container
        state_container.reminder_service.clear_reminder()
        return {"status": "ok"}

    return app


def _timer_payload(timer: SessionTimer) -> dict[str, object]:
    elapsed = timer.elapsed_seconds()
    return {
        "active_side": timer.active_side.value if timer.active_side else None,
        "elapsed_seconds": elapsed,
        "elapsed": format_duration(elapsed),
    }


def _feed_payload(feed: SingleFeed) -> dict[str, object]:
    return {
        "side": feed.side.value,
        "duration_seconds": feed.duration_seconds,
        "duration": format_duration(feed.duration_seconds),
        "end_time": feed.end_time,
    }


def _record_payload(
    record: FeedingRecord, previous_end_time: int | None
) -> dict[str, object]:
    start_time = min(session.start_time for session in record.sessions)
    time_since = (
        format_time_since(start_time - previous_end_time)
        if previous_end_time is not None
        else ""
    )
    return {
        "id": record.id,
        "pending": record.is_pending,
        "start_time": start_time,
        "end_time": record.end_time,
        "time_since_previous": time_since,
        "sessions": [_feed_payload(session) for session in record.sessions],
    }


def _daily_payload(summary: DailySummary) -> dict[str, object]:
    return {
        "day": summary.day.isoformat(),
        "total_feeds": summary.total_feeds,
        "total_seconds": summary.total_seconds,
        "left_seconds": summary.left_seconds,
        "right_seconds": summary.right_seconds,
        "total": format_duration(summary.total_seconds),
        "left": format_duration(summary.left_seconds),
        "right": format_duration(summary.right_seconds),
    }


def _monthly_payload(summary: MonthlySummary) -> dict[str, object]:
    return {
        "year": summary.year,
        "month": summary.month,
        "total_feeds": summary.total_feeds,
        "days_with_feeds": summary.days_with_feeds,
        "average_per_day": summary.average_per_day,
        "feeds_by_day": {
            day.isoformat(): count for day, count in summary.feeds_by_day.items()
        },
    }


def _reminder_payload(reminder: Reminder | None) -> dict[str, int] | None:
    if reminder is None:
        return None
    return {"fire_at": reminder.fire_at, "delay_ms": reminder.delay_ms}
