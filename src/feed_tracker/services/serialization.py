"""Encoding of the persisted feeding history blob."""

import json
import logging

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from feed_tracker.domain.feeding import FeedingRecord, FeedingSide, History, SingleFeed
from feed_tracker.services.history import new_record_id

_logger = logging.getLogger(__name__)


class StoredFeed(BaseModel):
    """Persisted single feed."""

    model_config = ConfigDict(populate_by_name=True)

    side: FeedingSide
    duration: int
    end_time: int = Field(alias="endTime")

    @field_validator("duration")
    @classmethod
    def clamp_duration(cls, value: int) -> int:
        return _clamp_duration(value)


class StoredRecord(BaseModel):
    """Persisted feeding record."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    sessions: list[StoredFeed] = Field(min_length=1, max_length=2)
    end_time: int = Field(alias="endTime")

    @model_validator(mode="after")
    def order_sessions(self) -> "StoredRecord":
        """Reject a complete record fed twice on one side; keep Left first."""
        if len({feed.side for feed in self.sessions}) != len(self.sessions):
            raise ValueError("A feeding record cannot hold the same side twice")
        self.sessions.sort(key=lambda feed: feed.side is not FeedingSide.LEFT)
        return self


class LegacyStoredFeed(BaseModel):
    """Record shape from before feeds were grouped: one side per entry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    side: FeedingSide
    duration: int
    end_time: int = Field(alias="endTime")

    @field_validator("duration")
    @classmethod
    def clamp_duration(cls, value: int) -> int:
        return _clamp_duration(value)


def _clamp_duration(value: int) -> int:
    if value >= 0:
        return value
    _logger.warning("Negative stored feed duration clamped to zero: %s", value)
    return 0


_RECORDS = TypeAdapter(list[StoredRecord])
_LEGACY_RECORDS = TypeAdapter(list[LegacyStoredFeed])


class HistoryDecodeError(ValueError):
    """Raised when a persisted blob cannot be turned into a history."""


def encode_history(history: History) -> bytes:
    """Serialize a history newest first."""
    stored = [
        StoredRecord(
            id=record.id,
            sessions=[
                StoredFeed(
                    side=session.side,
                    duration=session.duration_seconds,
                    end_time=session.end_time,
                )
                for session in record.sessions
            ],
            end_time=record.end_time,
        )
        for record in history
    ]
    return _RECORDS.dump_json(stored, by_alias=True)


def decode_history(data: bytes) -> History:
    """Parse a persisted blob, migrating the legacy shape when detected."""
    try:
        payload = json.loads(data)
    except ValueError as exc:
        raise HistoryDecodeError("Persisted history is not valid JSON") from exc
    if not isinstance(payload, list):
        raise HistoryDecodeError("Persisted history must be a list")
    try:
        if _is_legacy(payload):
            return _migrate_legacy(_LEGACY_RECORDS.validate_python(payload))
        return tuple(_to_record(stored) for stored in _RECORDS.validate_python(payload))
    except ValidationError as exc:
        raise HistoryDecodeError("Persisted history has an invalid shape") from exc


def _is_legacy(payload: list[object]) -> bool:
    return bool(payload) and isinstance(payload[0], dict) and "side" in payload[0]


def _migrate_legacy(entries: list[LegacyStoredFeed]) -> History:
    # Legacy entries were stored oldest first.
    _logger.info("Migrating %s legacy feeding entries", len(entries))
    migrated = [
        FeedingRecord(
            id=entry.id or new_record_id(),
            sessions=(
                SingleFeed(
                    side=entry.side,
                    duration_seconds=entry.duration,
                    end_time=entry.end_time,
                ),
            ),
            end_time=entry.end_time,
        )
        for entry in entries
    ]
    return tuple(reversed(migrated))


def _to_record(stored: StoredRecord) -> FeedingRecord:
    return FeedingRecord(
        id=stored.id,
        sessions=tuple(
            SingleFeed(
                side=feed.side,
                duration_seconds=feed.duration,
                end_time=feed.end_time,
            )
            for feed in stored.sessions
        ),
        end_time=stored.end_time,
    )
