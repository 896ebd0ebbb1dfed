"""Command-line host for restoring a legacy task backup.

Usage:
    taskrestore import backup.xml [--database-url sqlite:///./tasks.db] [--timezone America/New_York]
"""

import argparse
import logging
import os
import sys
from typing import Optional

from sqlalchemy.orm import sessionmaker

from taskrestore.backup.callback_queue import CallbackQueue
from taskrestore.backup.orchestrator import ImportState, start_import
from taskrestore.database import database as db
from taskrestore.database.import_store import SqlImportStore


class ConsoleHost:
    """Prints progress to stderr and the summary to stdout."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet
        self.exit_code = 0

    def on_progress(self, message: str) -> None:
        if not self.quiet:
            print(message, file=sys.stderr)

    def on_progress_dismissed(self) -> None:
        pass

    def on_summary(self, scanned: int, imported: int, skipped: int, source_path: str) -> None:
        print(f"Import summary for {source_path}")
        print(f"  tasks read:     {scanned}")
        print(f"  tasks imported: {imported}")
        print(f"  tasks skipped:  {skipped}")

    def on_fatal_error(self, error: BaseException) -> None:
        print(f"Error: import failed: {error}", file=sys.stderr)
        self.exit_code = 1

    def on_import_complete(self) -> None:
        pass


def run_import(
    input_file: str,
    *,
    database_url: Optional[str] = None,
    timezone: Optional[str] = None,
    quiet: bool = False,
) -> int:
    """Import `input_file` into the configured database; return a process exit code."""
    database_url = database_url or db.DATABASE_URL
    engine = db.build_engine(database_url) if database_url != db.DATABASE_URL else db.engine
    db.init_db(engine_override=engine, database_url_override=database_url)
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    host = ConsoleHost(quiet=quiet)
    callbacks = CallbackQueue()
    job = start_import(
        input_file,
        host,
        lambda: SqlImportStore(session_factory()),
        callbacks,
        default_tz=timezone,
    )

    # The main thread is the host thread: drain callbacks until the worker is done.
    while not job.join(timeout=0.1):
        callbacks.run_pending()
    callbacks.run_pending()

    if job.state is ImportState.SUCCEEDED:
        job.acknowledge_summary()
        callbacks.run_pending()
    return host.exit_code


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="taskrestore",
        description="Restore tasks, tags and sync links from a legacy XML task backup.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Import a backup file")
    import_parser.add_argument("input_file", help="Path to the XML backup")
    import_parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy database URL (default: $DATABASE_URL or sqlite:///./taskrestore.db)",
    )
    import_parser.add_argument(
        "--timezone",
        default=None,
        help="Zone for backup dates without a zone designator (default: $BACKUP_DEFAULT_TIMEZONE or UTC)",
    )
    import_parser.add_argument("-q", "--quiet", action="store_true", help="Do not print progress")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not os.path.exists(args.input_file):
        print(f"Error: Input file '{args.input_file}' not found", file=sys.stderr)
        return 1

    return run_import(
        args.input_file,
        database_url=args.database_url,
        timezone=args.timezone,
        quiet=args.quiet,
    )


if __name__ == "__main__":
    sys.exit(main())
