"""Task data model for taskrestore."""

from datetime import datetime, timedelta
from enum import IntEnum
from typing import Optional
from pydantic import BaseModel, Field

from taskrestore.models.constants import LEGACY_BACKUP_SOURCE, MAX_STORED_INT


class Importance(IntEnum):
    """Task importance, most important first (stored as ordinal)."""
    DO_OR_DIE = 0
    MUST_DO = 1
    SHOULD_DO = 2
    NONE = 3


class Task(BaseModel):
    """Canonical Task model."""

    id: Optional[str] = Field(None, description="Store-assigned identifier (None until persisted)")
    source_type: str = Field(LEGACY_BACKUP_SOURCE, description="Where the task came from")
    title: str = Field("", description="Task title")
    notes: Optional[str] = Field(None, description="Task notes")
    importance: Importance = Field(Importance.NONE, description="Importance ordinal")

    # Timestamps (naive UTC; None means unset)
    created_at: Optional[datetime] = Field(None, description="Task creation timestamp")
    completed_at: Optional[datetime] = Field(None, description="Completion timestamp")
    due_date: Optional[datetime] = Field(None, description="Due date")
    hide_until: Optional[datetime] = Field(None, description="Hidden until this time")
    timer_start: Optional[datetime] = Field(None, description="Running timer start")
    last_notified: Optional[datetime] = Field(None, description="Last reminder fired at")

    estimated_seconds: int = Field(0, ge=0, le=MAX_STORED_INT, description="Estimated effort in seconds")
    elapsed_seconds: int = Field(0, ge=0, le=MAX_STORED_INT, description="Tracked effort in seconds")
    postpone_count: int = Field(0, ge=0, le=MAX_STORED_INT, description="Number of times postponed")

    reminder_period: timedelta = Field(timedelta(0), description="Periodic reminder interval")
    reminder_flags: int = Field(0, ge=0, le=MAX_STORED_INT, description="Reminder bitmask")

    recurrence_rule: Optional[str] = Field(
        None, description="iCalendar RRULE (without the leading 'RRULE:' prefix)"
    )

    class Config:
        """Pydantic configuration."""
        validate_assignment = True
