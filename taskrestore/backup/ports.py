"""Ports used by the backup import pipeline.

The importer depends on these Protocols instead of concrete implementations,
so the store and the host can be swapped (SQL store, in-memory fakes, CLI or
HTTP hosts).
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Protocol

from taskrestore.models.sync_link import SyncLink
from taskrestore.models.task import Task


class ImportStore(Protocol):
    """Transactional task store consumed by the format importer."""

    def find_tasks_by_title_and_creation_second(self, title: str, created_at: datetime) -> list[str]: ...

    def save_task(self, task: Task) -> Task: ...

    def synchronize_tags(self, task_id: str, tag_names: Iterable[str]) -> None: ...

    def save_sync_link(self, link: SyncLink) -> None: ...


class ImportHost(Protocol):
    """Host-side callbacks; always invoked on the host's callback queue."""

    def on_progress(self, message: str) -> None: ...

    def on_progress_dismissed(self) -> None: ...

    def on_summary(self, scanned: int, imported: int, skipped: int, source_path: str) -> None: ...

    def on_fatal_error(self, error: BaseException) -> None: ...

    def on_import_complete(self) -> None: ...
