"""Dependency container wiring for the application."""

from dataclasses import dataclass
from pathlib import Path

from feed_tracker.adapters.file_store import FileKeyValueStore
from feed_tracker.adapters.log_notifier import LogNotifier
from feed_tracker.adapters.system_clock import SystemClock
from feed_tracker.config import Settings
from feed_tracker.services.feeding import Clock, FeedingService
from feed_tracker.services.reminders import ReminderService
from feed_tracker.services.scheduler import AsyncioScheduler
from feed_tracker.services.stats import StatsService
from feed_tracker.services.timer import SessionTimer


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Clock
    feeding_service: FeedingService
    session_timer: SessionTimer
    stats_service: StatsService
    reminder_service: ReminderService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    clock = SystemClock()
    scheduler = AsyncioScheduler()
    feeding_service = FeedingService(
        store=FileKeyValueStore(Path(resolved_settings.data_dir)),
        clock=clock,
        scheduler=scheduler,
        key=resolved_settings.history_key,
        window_ms=resolved_settings.pending_window_ms,
    )
    reminder_service = ReminderService(
        clock=clock,
        scheduler=scheduler,
        notifier=LogNotifier(),
    )
    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        feeding_service=feeding_service,
        session_timer=SessionTimer(clock),
        stats_service=StatsService(resolved_settings.timezone),
        reminder_service=reminder_service,
    )
