"""Repository for tags and task/tag associations."""

import logging
from typing import Iterable, List, Set

from sqlalchemy.orm import Session

from taskrestore.database.models import TagDB, TaskTagDB

logger = logging.getLogger(__name__)


class TagRepository:
    """Repository for tag database operations."""

    def __init__(self, db: Session):
        self.db = db

    def _get_or_add(self, name: str) -> TagDB:
        tag_db = self.db.query(TagDB).filter(TagDB.name == name).first()
        if tag_db is None:
            tag_db = TagDB(name=name)
            self.db.add(tag_db)
            self.db.flush()
        return tag_db

    def synchronize_tags(self, task_id: str, tag_names: Iterable[str]) -> List[str]:
        """Ensure the task is associated with every given tag name.

        Tags are created on first use. Existing associations are kept, so
        calling this twice with the same names is a no-op.
        """
        seen: Set[str] = set()
        names: List[str] = []
        for name in tag_names:
            name = (name or "").strip()
            if name and name not in seen:
                seen.add(name)
                names.append(name)
        if not names:
            return []

        try:
            linked = {
                row[0]
                for row in self.db.query(TaskTagDB.tag_id).filter(TaskTagDB.task_id == task_id).all()
            }
            for name in names:
                tag_db = self._get_or_add(name)
                if tag_db.id not in linked:
                    self.db.add(TaskTagDB(task_id=task_id, tag_id=tag_db.id))
                    linked.add(tag_db.id)
            self.db.commit()
            logger.debug(f"Synchronized {len(names)} tags for task {task_id}")
            return names
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to synchronize tags for task {task_id}: {type(e).__name__}: {str(e)}")
            raise

    def get_names_for_task(self, task_id: str) -> List[str]:
        """Tag names for a task, alphabetically."""
        rows = (
            self.db.query(TagDB.name)
            .join(TaskTagDB, TaskTagDB.tag_id == TagDB.id)
            .filter(TaskTagDB.task_id == task_id)
            .order_by(TagDB.name)
            .all()
        )
        return [row[0] for row in rows]
