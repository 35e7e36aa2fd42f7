"""Feeding history engine: grouping and auto-completion of feeding records.

A finished single-side feed either joins the most recent record (when that
record is still waiting for its other side and the feed ended within the
pending window) or starts a new pending record. A pending record that sees no
second feed within the window is completed with a zero-duration placeholder
for the skipped side.

All functions are pure: they take a ``History`` value and return a new one.
"""

import logging
from dataclasses import replace
from uuid import uuid4

from feed_tracker.domain.feeding import FeedingRecord, FeedingSide, History, SingleFeed

PENDING_WINDOW_MS = 10 * 60 * 1000

_logger = logging.getLogger(__name__)

_SIDE_ORDER = {FeedingSide.LEFT: 0, FeedingSide.RIGHT: 1}


def new_record_id() -> str:
    """Return a fresh, collision-resistant record id."""
    return uuid4().hex


def clear() -> History:
    """Return an empty history, dropping every record."""
    return ()


def add_finished_feed(
    history: History,
    feed: SingleFeed,
    record_id: str | None = None,
    window_ms: int = PENDING_WINDOW_MS,
) -> History:
    """Group ``feed`` into the pending head or prepend a new pending record."""
    feed = _clamp_duration(feed)
    head = history[0] if history else None
    if head is not None and _should_group(head, feed, window_ms):
        grouped = replace(
            head,
            sessions=_side_sorted((*head.sessions, feed)),
            end_time=feed.end_time,
        )
        return (grouped, *history[1:])

    record = FeedingRecord(
        id=record_id or new_record_id(),
        sessions=(feed,),
        end_time=feed.end_time,
    )
    return (record, *history)


def complete_record(record: FeedingRecord) -> FeedingRecord:
    """Fill the missing side of a pending record with a placeholder feed."""
    if not record.is_pending:
        return record
    existing = record.sessions[0]
    placeholder = SingleFeed(
        side=existing.side.opposite,
        duration_seconds=0,
        end_time=existing.end_time,
    )
    return replace(record, sessions=_side_sorted((existing, placeholder)))


def complete_pending(history: History, record_id: str) -> History:
    """Complete the record with ``record_id`` if it is still pending.

    Returns ``history`` unchanged when the record is gone or was already
    grouped or completed by an earlier mutation.
    """
    for index, record in enumerate(history):
        if record.id != record_id:
            continue
        if not record.is_pending:
            return history
        _logger.info("Auto-completing feeding record id=%s", record_id)
        return (*history[:index], complete_record(record), *history[index + 1 :])
    return history


def sweep_stale_pending(
    history: History, now_ms: int, window_ms: int = PENDING_WINDOW_MS
) -> History:
    """Complete every pending record whose window has elapsed at ``now_ms``."""
    swept = tuple(
        complete_record(record) if _is_stale(record, now_ms, window_ms) else record
        for record in history
    )
    return history if swept == history else swept


def complete_superseded(history: History) -> History:
    """Complete pending records below the head; they can no longer group."""
    if not any(record.is_pending for record in history[1:]):
        return history
    return (*history[:1], *(complete_record(record) for record in history[1:]))


def pending_head(history: History) -> FeedingRecord | None:
    """Return the most recent record when it is still pending."""
    if history and history[0].is_pending:
        return history[0]
    return None


def last_feed_end_time(history: History) -> int | None:
    """Return the end time of the most recent record, if any."""
    return history[0].end_time if history else None


def chronological(history: History) -> History:
    """Return records oldest first."""
    return tuple(reversed(history))


def _should_group(head: FeedingRecord, feed: SingleFeed, window_ms: int) -> bool:
    return (
        head.is_pending
        and head.sessions[0].side != feed.side
        and feed.end_time - head.end_time < window_ms
    )


def _is_stale(record: FeedingRecord, now_ms: int, window_ms: int) -> bool:
    return record.is_pending and now_ms - record.end_time >= window_ms


def _side_sorted(sessions: tuple[SingleFeed, ...]) -> tuple[SingleFeed, ...]:
    # Left first regardless of which side finished first.
    return tuple(sorted(sessions, key=lambda session: _SIDE_ORDER[session.side]))


def _clamp_duration(feed: SingleFeed) -> SingleFeed:
    if feed.duration_seconds >= 0:
        return feed
    _logger.warning(
        "Negative feed duration clamped to zero: side=%s duration=%s",
        feed.side.value,
        feed.duration_seconds,
    )
    return replace(feed, duration_seconds=0)
