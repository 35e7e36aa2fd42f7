"""Feeding service: the single owner of the feeding history."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from feed_tracker.domain.feeding import FeedingRecord, History, SingleFeed
from feed_tracker.services import history as engine
from feed_tracker.services.scheduler import Scheduler
from feed_tracker.services.serialization import (
    HistoryDecodeError,
    decode_history,
    encode_history,
)

HISTORY_KEY = "feedingHistory"

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Durable storage for serialized blobs."""

    def read(self, key: str) -> bytes | None:
        """Return the stored bytes for a key, if present."""

    def write(self, key: str, data: bytes) -> None:
        """Store bytes under a key."""

    def delete(self, key: str) -> None:
        """Remove a key if present."""


class Clock(Protocol):
    """Source of the current time."""

    def now_ms(self) -> int:
        """Return the current time in epoch milliseconds."""


@dataclass(frozen=True)
class FeedingUpdate:
    """Result of a history mutation."""

    history: History
    warning: str | None = None


@dataclass
class FeedingService:
    """Applies feeding mutations, persists them and schedules auto-completion.

    Every mutation replaces ``history`` with a new value, writes it to the
    store and re-arms the single auto-completion timer for the pending head.
    """

    store: KeyValueStore
    clock: Clock
    scheduler: Scheduler
    key: str = HISTORY_KEY
    window_ms: int = engine.PENDING_WINDOW_MS
    history: History = field(default_factory=engine.clear)
    _timer: object | None = field(default=None, init=False, repr=False)
    _timer_record_id: str | None = field(default=None, init=False, repr=False)

    def load(self) -> History:
        """Read the persisted history and complete stale pending records."""
        loaded = self._read()
        swept = engine.complete_superseded(
            engine.sweep_stale_pending(loaded, self.clock.now_ms(), self.window_ms)
        )
        self.history = swept
        if swept != loaded:
            self._persist()
        self._reschedule()
        return self.history

    def add_finished_feed(self, feed: SingleFeed) -> FeedingUpdate:
        """Record a finished single-side feed."""
        added = engine.add_finished_feed(self.history, feed, window_ms=self.window_ms)
        self.history = engine.complete_superseded(added)
        _logger.info(
            "Feed added: side=%s duration=%s records=%s",
            feed.side.value,
            feed.duration_seconds,
            len(self.history),
        )
        return self._commit()

    def clear(self) -> FeedingUpdate:
        """Drop the whole history."""
        self.history = engine.clear()
        warning = None
        try:
            self.store.delete(self.key)
        except OSError:
            _logger.exception("Failed to delete feeding history")
            warning = "Feeding history could not be removed from storage."
        self._reschedule()
        return FeedingUpdate(history=self.history, warning=warning)

    def complete_pending(self, record_id: str) -> FeedingUpdate:
        """Auto-complete a record if it is still the same pending record."""
        completed = engine.complete_pending(self.history, record_id)
        if completed is self.history:
            return FeedingUpdate(history=self.history)
        self.history = completed
        return self._commit()

    def last_feed_end_time(self) -> int | None:
        """Return the end time of the most recent record, if any."""
        return engine.last_feed_end_time(self.history)

    def chronological(self) -> History:
        """Return records oldest first."""
        return engine.chronological(self.history)

    def pending_record(self) -> FeedingRecord | None:
        """Return the pending head record, if any."""
        return engine.pending_head(self.history)

    @property
    def timer_scheduled(self) -> bool:
        return self._timer is not None

    def _read(self) -> History:
        try:
            data = self.store.read(self.key)
        except OSError:
            _logger.exception("Failed to read feeding history")
            return engine.clear()
        if data is None:
            return engine.clear()
        try:
            return decode_history(data)
        except HistoryDecodeError:
            _logger.exception("Discarding malformed feeding history")
            return engine.clear()

    def _commit(self) -> FeedingUpdate:
        warning = self._persist()
        self._reschedule()
        return FeedingUpdate(history=self.history, warning=warning)

    def _persist(self) -> str | None:
        try:
            self.store.write(self.key, encode_history(self.history))
        except OSError:
            _logger.exception("Failed to save feeding history")
            return "Feeding history could not be saved."
        return None

    def _reschedule(self) -> None:
        head = engine.pending_head(self.history)
        if head is not None and head.id == self._timer_record_id:
            return
        self._cancel_timer()
        if head is None:
            return
        delay_ms = head.end_time + self.window_ms - self.clock.now_ms()
        if delay_ms <= 0:
            self.complete_pending(head.id)
            return
        record_id = head.id
        self._timer = self.scheduler.after(
            delay_ms, lambda: self._on_timer(record_id)
        )
        self._timer_record_id = record_id

    def _on_timer(self, record_id: str) -> None:
        self._timer = None
        self._timer_record_id = None
        self.complete_pending(record_id)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self.scheduler.cancel(self._timer)
        self._timer = None
        self._timer_record_id = None
