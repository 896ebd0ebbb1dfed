"""SQLAlchemy database models for taskrestore."""

from datetime import datetime, timedelta
import uuid
from sqlalchemy import BigInteger, Column, String, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint

from taskrestore.database.database import Base
from taskrestore.models.task import Importance


def importance_from_value(value) -> Importance:
    """Convert a stored ordinal to Importance, falling back to NONE."""
    try:
        return Importance(int(value))
    except (TypeError, ValueError):
        return Importance.NONE


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # Source metadata
    source_type = Column(String, nullable=False, index=True)

    # Basic fields
    title = Column(String, nullable=False, index=True)
    notes = Column(String, nullable=True)
    importance = Column(Integer, nullable=False, default=Importance.NONE.value)

    # Timestamps (naive UTC)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    completed_at = Column(DateTime, nullable=True)
    due_date = Column(DateTime, nullable=True)
    hide_until = Column(DateTime, nullable=True)
    timer_start = Column(DateTime, nullable=True)
    last_notified = Column(DateTime, nullable=True)

    # Effort tracking
    estimated_seconds = Column(Integer, nullable=False, default=0)
    elapsed_seconds = Column(Integer, nullable=False, default=0)
    postpone_count = Column(Integer, nullable=False, default=0)

    # Reminders
    reminder_period_ms = Column(BigInteger, nullable=False, default=0)
    reminder_flags = Column(Integer, nullable=False, default=0)

    # Recurrence (RRULE text)
    recurrence_rule = Column(String, nullable=True)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskrestore.models.task import Task

        return Task(
            id=self.id,
            source_type=self.source_type,
            title=self.title,
            notes=self.notes,
            importance=importance_from_value(self.importance),
            created_at=self.created_at,
            completed_at=self.completed_at,
            due_date=self.due_date,
            hide_until=self.hide_until,
            timer_start=self.timer_start,
            last_notified=self.last_notified,
            estimated_seconds=self.estimated_seconds or 0,
            elapsed_seconds=self.elapsed_seconds or 0,
            postpone_count=self.postpone_count or 0,
            reminder_period=timedelta(milliseconds=self.reminder_period_ms or 0),
            reminder_flags=self.reminder_flags or 0,
            recurrence_rule=self.recurrence_rule,
        )

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id or str(uuid.uuid4()),
            source_type=task.source_type,
            title=task.title,
            notes=task.notes,
            importance=int(task.importance),
            created_at=task.created_at,
            completed_at=task.completed_at,
            due_date=task.due_date,
            hide_until=task.hide_until,
            timer_start=task.timer_start,
            last_notified=task.last_notified,
            estimated_seconds=task.estimated_seconds,
            elapsed_seconds=task.elapsed_seconds,
            postpone_count=task.postpone_count,
            reminder_period_ms=int(task.reminder_period.total_seconds() * 1000),
            reminder_flags=task.reminder_flags,
            recurrence_rule=task.recurrence_rule,
        )


class TagDB(Base):
    """Database model for a tag name."""

    __tablename__ = "tags"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)


class TaskTagDB(Base):
    """Association between a task and a tag."""

    __tablename__ = "task_tags"

    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True)
    tag_id = Column(String, ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)


class SyncLinkDB(Base):
    """Remote sync service linkage for a task."""

    __tablename__ = "sync_links"
    __table_args__ = (
        UniqueConstraint("task_id", "service", name="uq_sync_link_task_service"),
    )

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    task_id = Column(String, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    service = Column(String, nullable=False)
    remote_task_id = Column(BigInteger, nullable=False)
    remote_series_id = Column(BigInteger, nullable=False)
    remote_list_id = Column(BigInteger, nullable=False)
    repeating = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from taskrestore.models.sync_link import SyncLink

        return SyncLink(
            task_id=self.task_id,
            service=self.service,
            remote_task_id=self.remote_task_id,
            remote_series_id=self.remote_series_id,
            remote_list_id=self.remote_list_id,
            repeating=self.repeating,
        )

    @classmethod
    def from_pydantic(cls, link):
        """Create database model from Pydantic model."""
        return cls(
            task_id=link.task_id,
            service=link.service,
            remote_task_id=link.remote_task_id,
            remote_series_id=link.remote_series_id,
            remote_list_id=link.remote_list_id,
            repeating=link.repeating,
        )
