"""Route a backup stream to the importer for its declared format version."""

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Optional

from taskrestore.backup.errors import StreamError, UnsupportedFormatError
from taskrestore.backup.legacy_importer import LegacyRecordImporter, ProgressCallback
from taskrestore.backup.ports import ImportStore
from taskrestore.backup.tag_reader import TagReader
from taskrestore.models.constants import DEFAULT_FORMAT_VERSION, ROOT_ATTR_FORMAT, ROOT_TAG
from taskrestore.models.import_tally import ImportTally

logger = logging.getLogger(__name__)


class FormatV2Importer:
    """Format 2 is accepted but carries nothing we import yet."""

    def __init__(self, reader: TagReader, store: ImportStore, tally: ImportTally, **kwargs):
        self.reader = reader
        self.tally = tally

    def run(self) -> ImportTally:
        # Drain so malformed trailing XML is still reported.
        while self.reader.advance() is not None:
            pass
        return self.tally


IMPORTERS = {
    1: LegacyRecordImporter,
    2: FormatV2Importer,
}


def parse_format_version(raw: Optional[str]) -> int:
    """Parse the root `format` attribute (absent means format 1).

    Raises:
        UnsupportedFormatError: non-integer or unknown version
    """
    if raw is None:
        return DEFAULT_FORMAT_VERSION
    try:
        version = int(raw.strip())
    except ValueError:
        raise UnsupportedFormatError(
            f"Did not know how to import tasks with xml format '{raw}'", version=raw
        ) from None
    if version not in IMPORTERS:
        raise UnsupportedFormatError(
            f"Did not know how to import tasks with xml format number '{raw}'", version=raw
        )
    return version


def dispatch_import(
    reader: TagReader,
    store: ImportStore,
    *,
    default_tz: tzinfo,
    tally: Optional[ImportTally] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> ImportTally:
    """Read the root element and hand the rest of the stream to its importer."""
    tally = tally if tally is not None else ImportTally()

    root = reader.next_start()
    if root is None:
        raise StreamError("Backup file contains no root element")
    if root.tag != ROOT_TAG:
        logger.warning(f"Unexpected backup root <{root.tag}>, expected <{ROOT_TAG}>")

    version = parse_format_version(reader.attribute(ROOT_ATTR_FORMAT))
    logger.info(f"Importing backup format {version} (root <{root.tag}>)")

    importer = IMPORTERS[version](
        reader,
        store,
        tally,
        default_tz=default_tz,
        on_progress=on_progress,
    )
    return importer.run()
