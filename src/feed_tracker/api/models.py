"""Pydantic models for API requests."""

from pydantic import BaseModel, Field


class ReminderRequest(BaseModel):
    """Reminder delay measured from the end of the last feed.

    Missing fields fall back to the configured default delay.
    """

    hours: int | None = Field(default=None, ge=0)
    minutes: int | None = Field(default=None, ge=0, le=59)
