"""Ordered, non-blocking channel from the import worker to the host thread."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Callback = Callable[[], None]


class CallbackQueue:
    """FIFO of callables posted from any thread and run on the host's thread.

    `post` never blocks. Hosts with their own loop call `run_pending()`
    periodically; hosts without one use `start_in_background()`.
    """

    def __init__(self):
        self._queue: "queue.Queue[Optional[Callback]]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None

    def post(self, callback: Callback) -> None:
        self._queue.put(callback)

    def _run_one(self, callback: Callback) -> None:
        try:
            callback()
        except Exception:
            logger.exception("Host callback failed")

    def run_pending(self) -> int:
        """Run every callback queued so far without waiting; return how many ran."""
        ran = 0
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return ran
            if callback is None:
                continue
            self._run_one(callback)
            ran += 1

    def run_forever(self) -> None:
        """Run callbacks as they arrive until `stop()` is called."""
        while True:
            callback = self._queue.get()
            if callback is None:
                return
            self._run_one(callback)

    def start_in_background(self, name: str = "taskrestore-callbacks") -> threading.Thread:
        if self._thread is None or not self._thread.is_alive():
            self._thread = threading.Thread(target=self.run_forever, name=name, daemon=True)
            self._thread.start()
        return self._thread

    def stop(self) -> None:
        self._queue.put(None)
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None
