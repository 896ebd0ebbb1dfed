"""Format 1 importer: rebuilds tasks, tags and sync links from legacy records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import tzinfo
from typing import Callable, List, Optional

from taskrestore.backup.date_codec import parse_backup_date
from taskrestore.backup.field_mapping import apply_task_fields
from taskrestore.backup.ports import ImportStore
from taskrestore.backup.tag_reader import EventKind, TagReader
from taskrestore.models.constants import (
    ALERT_TAG,
    PROGRESS_READING_TASK,
    SYNC_ATTR_REMOTE_ID,
    SYNC_ATTR_SERVICE,
    SYNC_REMOTE_ID_SEPARATOR,
    SYNC_TAG,
    TAG_ATTR_NAME,
    TAG_TAG,
    TASK_ATTR_CREATION_DATE,
    TASK_ATTR_NAME,
    TASK_TAG,
)
from taskrestore.models.import_tally import ImportTally
from taskrestore.models.sync_link import SyncLink
from taskrestore.models.task import Task

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


@dataclass(frozen=True)
class RemoteTriple:
    """Parsed `remote_id` of a <sync> element, waiting for its task to close."""

    service: str
    task_id: int
    series_id: int
    list_id: int


def parse_remote_triple(service: Optional[str], remote_id: Optional[str]) -> Optional[RemoteTriple]:
    """Parse `taskId|seriesId|listId`; None when anything is missing or malformed."""
    if not service or remote_id is None:
        return None
    tokens = remote_id.split(SYNC_REMOTE_ID_SEPARATOR)
    if len(tokens) != 3:
        return None
    try:
        task_id, series_id, list_id = (int(token.strip()) for token in tokens)
    except ValueError:
        return None
    return RemoteTriple(service=service, task_id=task_id, series_id=series_id, list_id=list_id)


class LegacyRecordImporter:
    """Consumes the rest of a format-1 stream, one event at a time.

    While a <task> element is open, its <tag> and <sync> children are
    collected and only written when the element closes, and only if the task
    itself was persisted. Children of a skipped task are dropped.
    """

    def __init__(
        self,
        reader: TagReader,
        store: ImportStore,
        tally: ImportTally,
        *,
        default_tz: tzinfo,
        on_progress: Optional[ProgressCallback] = None,
    ):
        self.reader = reader
        self.store = store
        self.tally = tally
        self.default_tz = default_tz
        self.on_progress = on_progress

        self.in_task = False
        self.current_task: Optional[Task] = None
        self.pending_tags: List[str] = []
        self.pending_sync: List[RemoteTriple] = []
        self.pending_upgrade_note: Optional[str] = None
        self.sync_on_complete = False

    def run(self) -> ImportTally:
        """Process events until end of document."""
        while True:
            tag_event = self.reader.advance()
            if tag_event is None:
                break
            if tag_event.kind is EventKind.END:
                if tag_event.tag == TASK_TAG and self.in_task:
                    self._finish_task()
                continue

            if tag_event.tag == TASK_TAG:
                self.in_task = True
                self.current_task = self._start_task()
            elif not self.in_task or self.current_task is None:
                continue
            elif tag_event.tag == TAG_TAG:
                self._collect_tag()
            elif tag_event.tag == ALERT_TAG:
                # Legacy alerts are not migrated.
                continue
            elif tag_event.tag == SYNC_TAG:
                self._collect_sync()
        return self.tally

    def _report_progress(self) -> None:
        if self.on_progress is not None:
            self.on_progress(PROGRESS_READING_TASK.format(count=self.tally.scanned))

    def _start_task(self) -> Optional[Task]:
        self.tally.scanned += 1
        self._report_progress()

        title = self.reader.attribute(TASK_ATTR_NAME)
        created_at = parse_backup_date(self.reader.attribute(TASK_ATTR_CREATION_DATE), self.default_tz)
        if not title or created_at is None:
            logger.debug(f"Skipping task #{self.tally.scanned}: missing name or creation date")
            self.tally.skipped += 1
            return None

        if self.store.find_tasks_by_title_and_creation_second(title, created_at):
            logger.debug(f"Skipping task {title!r}: already present")
            self.tally.skipped += 1
            return None

        task = Task(title=title, created_at=created_at)
        items = [self.reader.attribute_at(i) for i in range(self.reader.attribute_count())]
        ctx = apply_task_fields(task, items, self.reader.attributes(), self.default_tz)
        if ctx.sync_on_complete:
            self.sync_on_complete = True
        if ctx.upgrade_note is not None:
            self.pending_upgrade_note = ctx.upgrade_note

        if self.pending_upgrade_note is not None:
            if task.notes:
                task.notes = f"{task.notes}\n{self.pending_upgrade_note}"
            else:
                task.notes = self.pending_upgrade_note
            self.pending_upgrade_note = None

        saved = self.store.save_task(task)
        self.tally.imported += 1
        return saved

    def _collect_tag(self) -> None:
        name = self.reader.attribute(TAG_ATTR_NAME)
        if name and name not in self.pending_tags:
            self.pending_tags.append(name)

    def _collect_sync(self) -> None:
        service = self.reader.attribute(SYNC_ATTR_SERVICE)
        remote_id = self.reader.attribute(SYNC_ATTR_REMOTE_ID)
        triple = parse_remote_triple(service, remote_id)
        if triple is None:
            logger.debug(f"Dropping malformed sync link service={service!r} remote_id={remote_id!r}")
            return
        self.pending_sync.append(triple)

    def _finish_task(self) -> None:
        task = self.current_task
        if task is not None and task.id is not None:
            if self.pending_tags:
                self.store.synchronize_tags(task.id, list(self.pending_tags))
            for triple in self.pending_sync:
                self.store.save_sync_link(
                    SyncLink(
                        task_id=task.id,
                        service=triple.service,
                        remote_task_id=triple.task_id,
                        remote_series_id=triple.series_id,
                        remote_list_id=triple.list_id,
                        repeating=self.sync_on_complete,
                    )
                )

        self.in_task = False
        self.current_task = None
        self.pending_tags = []
        self.pending_sync = []
        self.pending_upgrade_note = None
        self.sync_on_complete = False
