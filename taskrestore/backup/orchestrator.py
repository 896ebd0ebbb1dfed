"""Run a backup import on a worker thread and report back to the host.

The worker performs the whole parse-dispatch-import sequence synchronously.
Everything the host sees goes through its `CallbackQueue`, in order:

1. "Opening backup..." (posted before the worker starts)
2. "Reading task N..." for every <task> element
3. progress dismissed
4. exactly one of `on_summary` or `on_fatal_error`

`ImportJob.acknowledge_summary()` then posts the caller's completion
callback and `on_import_complete` (at most once).
"""

from __future__ import annotations

import logging
import os
import threading
from datetime import tzinfo
from enum import Enum
from typing import Callable, Optional, Union

from dotenv import load_dotenv

from taskrestore.backup.callback_queue import CallbackQueue
from taskrestore.backup.date_codec import resolve_timezone
from taskrestore.backup.dispatcher import dispatch_import
from taskrestore.backup.ports import ImportHost, ImportStore
from taskrestore.backup.tag_reader import TagReader
from taskrestore.models.constants import PROGRESS_OPENING
from taskrestore.models.import_tally import ImportTally

load_dotenv()

logger = logging.getLogger(__name__)

# Zone for backup dates written without a designator
BACKUP_DEFAULT_TIMEZONE = os.getenv("BACKUP_DEFAULT_TIMEZONE", "UTC")

StoreFactory = Callable[[], ImportStore]


class ImportState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class ImportJob:
    """One import of one backup file."""

    def __init__(
        self,
        source_path: str,
        host: ImportHost,
        store_factory: StoreFactory,
        callback_queue: CallbackQueue,
        *,
        default_tz: Union[str, tzinfo, None] = None,
        run_after_import: Optional[Callable[[], None]] = None,
    ):
        self.source_path = os.fspath(source_path)
        self.host = host
        self.store_factory = store_factory
        self.callback_queue = callback_queue
        self.default_tz = resolve_timezone(default_tz if default_tz is not None else BACKUP_DEFAULT_TIMEZONE)
        self.run_after_import = run_after_import

        self.tally = ImportTally()
        self.state = ImportState.PENDING
        self.error: Optional[BaseException] = None

        self._thread: Optional[threading.Thread] = None
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._acknowledged = False

    def start(self) -> "ImportJob":
        if self._thread is not None:
            raise RuntimeError("Import already started")
        self._post_progress(PROGRESS_OPENING)
        self._thread = threading.Thread(
            target=self._run, name=f"taskrestore-import-{os.path.basename(self.source_path)}", daemon=True
        )
        self._thread.start()
        return self

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the worker to finish; True if it did within `timeout`."""
        return self._done.wait(timeout)

    @property
    def finished(self) -> bool:
        return self._done.is_set()

    def _post_progress(self, message: str) -> None:
        self.callback_queue.post(lambda: self.host.on_progress(message))

    def _run(self) -> None:
        self.state = ImportState.RUNNING
        logger.info(f"Starting import of {self.source_path}")
        store = None
        try:
            store = self.store_factory()
            with TagReader(self.source_path) as reader:
                dispatch_import(
                    reader,
                    store,
                    default_tz=self.default_tz,
                    tally=self.tally,
                    on_progress=self._post_progress,
                )
        except Exception as e:
            logger.exception(f"Import of {self.source_path} failed")
            self.error = e
            self.state = ImportState.FAILED
            self.callback_queue.post(self.host.on_progress_dismissed)
            self.callback_queue.post(lambda error=e: self.host.on_fatal_error(error))
        else:
            logger.info(self.tally.summary(self.source_path))
            tally = self.tally
            self.callback_queue.post(self.host.on_progress_dismissed)
            self.callback_queue.post(
                lambda: self.host.on_summary(tally.scanned, tally.imported, tally.skipped, self.source_path)
            )
            # Only acknowledgeable once the summary is queued ahead of the completion callbacks.
            self.state = ImportState.SUCCEEDED
        finally:
            try:
                close = getattr(store, "close", None)
                if close is not None:
                    close()
            except Exception as e:
                logger.error(f"Failed to close store after importing {self.source_path}: {type(e).__name__}: {str(e)}")
            finally:
                self._done.set()

    def acknowledge_summary(self) -> bool:
        """Record that the user dismissed the summary.

        Returns False if it was already acknowledged.

        Raises:
            RuntimeError: the import has not produced a summary
        """
        if self.state is not ImportState.SUCCEEDED:
            raise RuntimeError(f"No summary to acknowledge (import is {self.state.value})")
        with self._lock:
            if self._acknowledged:
                return False
            self._acknowledged = True
        if self.run_after_import is not None:
            self.callback_queue.post(self.run_after_import)
        self.callback_queue.post(self.host.on_import_complete)
        return True


def start_import(
    source_path: str,
    host: ImportHost,
    store_factory: StoreFactory,
    callback_queue: CallbackQueue,
    *,
    default_tz: Union[str, tzinfo, None] = None,
    run_after_import: Optional[Callable[[], None]] = None,
) -> ImportJob:
    """Post the opening message and start importing `source_path` in the background."""
    job = ImportJob(
        source_path,
        host,
        store_factory,
        callback_queue,
        default_tz=default_tz,
        run_after_import=run_after_import,
    )
    return job.start()
