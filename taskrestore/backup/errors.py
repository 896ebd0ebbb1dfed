"""Fatal errors raised by the backup import pipeline.

Everything else (unusable task, unknown field, malformed sync link) is
absorbed by the importer and never raised.
"""

from typing import Optional


class BackupImportError(Exception):
    """Base class for errors that abort a whole import."""


class StreamError(BackupImportError):
    """The backup file could not be read or is not well-formed XML."""


class UnsupportedFormatError(BackupImportError):
    """The root element declares a format version we cannot import."""

    def __init__(self, message: str, *, version: Optional[str] = None):
        super().__init__(message)
        self.version = version
