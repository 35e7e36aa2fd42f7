"""Shared test fixtures."""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from feed_tracker.config import Settings
from feed_tracker.containers import AppContainer
from feed_tracker.services.feeding import Clock, FeedingService, KeyValueStore
from feed_tracker.services.reminders import Notifier, ReminderService
from feed_tracker.services.scheduler import Scheduler
from feed_tracker.services.stats import StatsService
from feed_tracker.services.timer import SessionTimer

# 2024-03-15 12:00:00 UTC
T0 = 1_710_504_000_000
MINUTE_MS = 60_000


@dataclass
class FakeClock(Clock):
    """Clock that only moves when told to."""

    now: int = T0

    def now_ms(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@dataclass
class ManualScheduler(Scheduler):
    """Scheduler whose timers fire when ``run_due`` is called."""

    clock: FakeClock
    tasks: dict[int, tuple[int, Callable[[], None]]] = field(default_factory=dict)
    cancelled: list[int] = field(default_factory=list)
    _next_handle: int = 0

    def after(self, delay_ms: int, callback: Callable[[], None]) -> object:
        self._next_handle += 1
        self.tasks[self._next_handle] = (self.clock.now_ms() + delay_ms, callback)
        return self._next_handle

    def cancel(self, handle: object) -> None:
        if self.tasks.pop(handle, None) is not None:
            self.cancelled.append(handle)

    def due_times(self) -> list[int]:
        return sorted(due for due, _ in self.tasks.values())

    def run_due(self) -> int:
        due = [
            handle
            for handle, (due_at, _) in sorted(self.tasks.items())
            if due_at <= self.clock.now_ms()
        ]
        for handle in due:
            task = self.tasks.pop(handle, None)
            if task is not None:
                task[1]()
        return len(due)


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """In-memory key-value store for tests."""

    data: dict[str, bytes] = field(default_factory=dict)
    fail_writes: bool = False
    writes: int = 0

    def read(self, key: str) -> bytes | None:
        return self.data.get(key)

    def write(self, key: str, data: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.data[key] = data

    def delete(self, key: str) -> None:
        if self.fail_writes:
            raise OSError("read-only filesystem")
        self.data.pop(key, None)


@dataclass
class RecordingNotifier(Notifier):
    """Notifier that records notifications."""

    notifications: list[tuple[str, str]] = field(default_factory=list)

    def notify(self, title: str, body: str) -> None:
        self.notifications.append((title, body))


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(data_dir=str(tmp_path), timezone="UTC")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def feeding_service(
    store: InMemoryKeyValueStore, clock: FakeClock, scheduler: ManualScheduler
) -> FeedingService:
    return FeedingService(store=store, clock=clock, scheduler=scheduler)


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    clock: FakeClock,
    scheduler: ManualScheduler,
    feeding_service: FeedingService,
    notifier: RecordingNotifier,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        clock=clock,
        feeding_service=feeding_service,
        session_timer=SessionTimer(clock),
        stats_service=StatsService(settings.timezone),
        reminder_service=ReminderService(
            clock=clock, scheduler=scheduler, notifier=notifier
        ),
    )
