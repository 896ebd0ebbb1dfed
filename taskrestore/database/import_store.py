"""SQL-backed implementation of the importer's store port."""

from datetime import datetime
from typing import Iterable, List

from sqlalchemy.orm import Session

from taskrestore.database.repository import TaskRepository
from taskrestore.database.sync_link_repository import SyncLinkRepository
from taskrestore.database.tag_repository import TagRepository
from taskrestore.models.sync_link import SyncLink
from taskrestore.models.task import Task


class SqlImportStore:
    """Adapts the repositories to `taskrestore.backup.ports.ImportStore`."""

    def __init__(self, db: Session):
        self.db = db
        self.tasks = TaskRepository(db)
        self.tags = TagRepository(db)
        self.sync_links = SyncLinkRepository(db)

    def find_tasks_by_title_and_creation_second(self, title: str, created_at: datetime) -> List[str]:
        return self.tasks.find_by_title_and_creation_second(title, created_at)

    def save_task(self, task: Task) -> Task:
        return self.tasks.create(task)

    def synchronize_tags(self, task_id: str, tag_names: Iterable[str]) -> None:
        self.tags.synchronize_tags(task_id, tag_names)

    def save_sync_link(self, link: SyncLink) -> None:
        self.sync_links.save(link)

    def close(self) -> None:
        self.db.close()


def open_import_store() -> SqlImportStore:
    """Store on a fresh session from the configured engine (one per import worker)."""
    from taskrestore.database.database import SessionLocal

    return SqlImportStore(SessionLocal())
