"""Import tally for a backup run."""

from dataclasses import dataclass

from taskrestore.models.constants import SUMMARY_MESSAGE


@dataclass
class ImportTally:
    """Counters maintained by the format importer.

    For a completed import of a well-formed document
    ``scanned == imported + skipped`` always holds.
    """

    scanned: int = 0
    imported: int = 0
    skipped: int = 0

    def summary(self, source_path: str) -> str:
        return SUMMARY_MESSAGE.format(
            scanned=self.scanned,
            imported=self.imported,
            skipped=self.skipped,
            path=source_path,
        )
