"""Legacy XML backup import pipeline for taskrestore."""

from taskrestore.backup.errors import BackupImportError, StreamError, UnsupportedFormatError
from taskrestore.backup.tag_reader import TagReader, TagEvent, EventKind
from taskrestore.backup.dispatcher import dispatch_import, parse_format_version
from taskrestore.backup.legacy_importer import LegacyRecordImporter
from taskrestore.backup.callback_queue import CallbackQueue
from taskrestore.backup.orchestrator import ImportJob, ImportState, start_import

__all__ = [
    "BackupImportError",
    "StreamError",
    "UnsupportedFormatError",
    "TagReader",
    "TagEvent",
    "EventKind",
    "dispatch_import",
    "parse_format_version",
    "LegacyRecordImporter",
    "CallbackQueue",
    "ImportJob",
    "ImportState",
    "start_import",
]
