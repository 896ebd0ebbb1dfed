"""Repository layer for database operations."""

import logging
from datetime import datetime, timedelta
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_, desc

from taskrestore.models.task import Task
from taskrestore.database.models import TaskDB

logger = logging.getLogger(__name__)


class TaskRepository:
    """Repository for Task database operations."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, task: Task) -> Task:
        """Create a new task; the store assigns the id when the task has none."""
        try:
            task_db = TaskDB.from_pydantic(task)
            self.db.add(task_db)
            self.db.commit()
            self.db.refresh(task_db)
            logger.debug(f"Created task {task_db.id}: {task.title[:50]}")
            return task_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create task {task.title[:50]!r}: {type(e).__name__}: {str(e)}")
            raise

    def get(self, task_id: str) -> Optional[Task]:
        """Get task by ID."""
        task_db = self.db.query(TaskDB).filter(TaskDB.id == task_id).first()
        return task_db.to_pydantic() if task_db else None

    def get_all(self) -> List[Task]:
        """Get all tasks sorted by creation date (newest first)."""
        tasks_db = self.db.query(TaskDB).order_by(desc(TaskDB.created_at)).all()
        return [task_db.to_pydantic() for task_db in tasks_db]

    def count(self) -> int:
        return self.db.query(TaskDB).count()

    def find_by_title_and_creation_second(self, title: str, created_at: datetime) -> List[str]:
        """Return ids of tasks with this title created within the same whole second.

        Sub-second precision is ignored on both sides so that legacy backups,
        which only carry whole seconds, match rows stored with fractions.
        """
        second_start = created_at.replace(microsecond=0)
        second_end = second_start + timedelta(seconds=1)
        rows = self.db.query(TaskDB.id).filter(
            and_(
                TaskDB.title == title,
                TaskDB.created_at >= second_start,
                TaskDB.created_at < second_end,
            )
        ).all()
        return [row[0] for row in rows]
