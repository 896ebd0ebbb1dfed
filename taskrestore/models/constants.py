"""Constants for taskrestore.

This module centralizes the legacy backup vocabulary and the user-facing
message templates used throughout the import pipeline.
"""

# Provenance recorded on every imported task
LEGACY_BACKUP_SOURCE = "legacy_backup"

# Backup document structure
ROOT_TAG = "astrid"
ROOT_ATTR_FORMAT = "format"
DEFAULT_FORMAT_VERSION = 1

TASK_TAG = "task"
TAG_TAG = "tag"
TAG_ATTR_NAME = "name"
ALERT_TAG = "alert"
SYNC_TAG = "sync"
SYNC_ATTR_SERVICE = "service"
SYNC_ATTR_REMOTE_ID = "remote_id"
SYNC_REMOTE_ID_SEPARATOR = "|"

# Legacy task attributes read before the field mapping runs
TASK_ATTR_NAME = "name"
TASK_ATTR_CREATION_DATE = "creation_date"

# Legacy `flags` value meaning "sync on complete"
FLAG_SYNC_ON_COMPLETE = 1 << 1

# Host messages
PROGRESS_OPENING = "Opening backup..."
PROGRESS_READING_TASK = "Reading task {count}..."
SUMMARY_MESSAGE = "Read {scanned} tasks, imported {imported}, skipped {skipped} from {path}"
GOAL_DEADLINE_NOTE = "Goal Deadline: {date}"

# Largest value an INTEGER column holds on every supported backend
MAX_STORED_INT = 2**31 - 1
