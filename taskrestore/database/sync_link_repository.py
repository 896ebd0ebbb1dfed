"""Repository for remote sync links."""

import logging
from typing import List

from sqlalchemy.orm import Session

from taskrestore.database.models import SyncLinkDB
from taskrestore.models.sync_link import SyncLink

logger = logging.getLogger(__name__)


class SyncLinkRepository:
    """Repository for SyncLink database operations."""

    def __init__(self, db: Session):
        self.db = db

    def save(self, link: SyncLink) -> SyncLink:
        """Insert a link, or update the existing one for the same task and service."""
        link_db = self.db.query(SyncLinkDB).filter(
            SyncLinkDB.task_id == link.task_id,
            SyncLinkDB.service == link.service,
        ).first()
        try:
            if link_db is None:
                link_db = SyncLinkDB.from_pydantic(link)
                self.db.add(link_db)
            else:
                link_db.remote_task_id = link.remote_task_id
                link_db.remote_series_id = link.remote_series_id
                link_db.remote_list_id = link.remote_list_id
                link_db.repeating = link.repeating
            self.db.commit()
            self.db.refresh(link_db)
            logger.debug(f"Saved {link.service} sync link for task {link.task_id}")
            return link_db.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save sync link for task {link.task_id}: {type(e).__name__}: {str(e)}")
            raise

    def get_for_task(self, task_id: str) -> List[SyncLink]:
        rows = self.db.query(SyncLinkDB).filter(SyncLinkDB.task_id == task_id).all()
        return [row.to_pydantic() for row in rows]

    def count(self) -> int:
        return self.db.query(SyncLinkDB).count()
