"""Data models for taskrestore."""

from taskrestore.models.task import Task, Importance
from taskrestore.models.sync_link import SyncLink
from taskrestore.models.import_tally import ImportTally

__all__ = [
    "Task",
    "Importance",
    "SyncLink",
    "ImportTally",
]
