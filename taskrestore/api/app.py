"""FastAPI host for taskrestore.

Imports run in the background; clients poll the job for progress and
acknowledge the summary once they have shown it.
"""

import os
import threading
import uuid
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from taskrestore.backup.callback_queue import CallbackQueue
from taskrestore.backup.orchestrator import ImportJob, ImportState, StoreFactory, start_import
from taskrestore.database.import_store import open_import_store

# Initialize FastAPI app
app = FastAPI(
    title="taskrestore API",
    description="Restore tasks, tags and sync links from legacy XML task backups",
    version="0.1.0",
)


class JobHost:
    """Records host callbacks so they can be served to polling clients."""

    def __init__(self):
        self._lock = threading.Lock()
        self.messages: List[str] = []
        self.progress_visible = True
        self.summary: Optional[Dict[str, int]] = None
        self.error: Optional[str] = None
        self.completed = False

    def on_progress(self, message: str) -> None:
        with self._lock:
            self.messages.append(message)

    def on_progress_dismissed(self) -> None:
        self.progress_visible = False

    def on_summary(self, scanned: int, imported: int, skipped: int, source_path: str) -> None:
        self.summary = {"scanned": scanned, "imported": imported, "skipped": skipped}

    def on_fatal_error(self, error: BaseException) -> None:
        self.error = str(error)

    def on_import_complete(self) -> None:
        self.completed = True


# In-memory job registry (insertion ordered; running jobs are never evicted)
jobs: Dict[str, ImportJob] = {}
hosts: Dict[str, JobHost] = {}

# Finished jobs kept for polling before the oldest are dropped
MAX_FINISHED_JOBS = int(os.getenv("MAX_FINISHED_IMPORT_JOBS", "100"))


def _evict_finished_jobs() -> None:
    finished = [job_id for job_id, job in jobs.items() if job.finished]
    for job_id in finished[:max(0, len(finished) - MAX_FINISHED_JOBS)]:
        jobs.pop(job_id, None)
        hosts.pop(job_id, None)


_callback_queue: Optional[CallbackQueue] = None


def get_callback_queue() -> CallbackQueue:
    """Process-wide host callback queue, drained by a background thread."""
    global _callback_queue
    if _callback_queue is None:
        _callback_queue = CallbackQueue()
        _callback_queue.start_in_background()
    return _callback_queue


def get_store_factory() -> StoreFactory:
    return open_import_store


# Request/response models
class ImportRequest(BaseModel):
    """Request to import a backup file readable by the server."""
    path: str = Field(..., description="Path of the XML backup on the server")
    timezone: Optional[str] = Field(None, description="Zone for dates without a designator")


class ImportStatusResponse(BaseModel):
    """Current state of an import job."""
    id: str
    source_path: str
    state: str
    messages: List[str]
    progress_visible: bool
    scanned: int
    imported: int
    skipped: int
    summary: Optional[Dict[str, int]] = None
    error: Optional[str] = None
    completed: bool = False


def _status(job_id: str) -> ImportStatusResponse:
    job = jobs[job_id]
    host = hosts[job_id]
    return ImportStatusResponse(
        id=job_id,
        source_path=job.source_path,
        state=job.state.value,
        messages=list(host.messages),
        progress_visible=host.progress_visible,
        scanned=job.tally.scanned,
        imported=job.tally.imported,
        skipped=job.tally.skipped,
        summary=host.summary,
        error=host.error,
        completed=host.completed,
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.post("/imports", response_model=ImportStatusResponse, status_code=202)
def create_import(
    request: ImportRequest,
    callback_queue: CallbackQueue = Depends(get_callback_queue),
    store_factory: StoreFactory = Depends(get_store_factory),
):
    """Start importing a backup file in the background."""
    if not os.path.isfile(request.path):
        raise HTTPException(status_code=404, detail=f"Backup file not found: {request.path}")

    _evict_finished_jobs()
    job_id = str(uuid.uuid4())
    host = JobHost()
    hosts[job_id] = host
    jobs[job_id] = start_import(
        request.path,
        host,
        store_factory,
        callback_queue,
        default_tz=request.timezone,
    )
    return _status(job_id)


@app.get("/imports/{job_id}", response_model=ImportStatusResponse)
def get_import(job_id: str):
    """Get progress, tally and outcome of an import job."""
    if job_id not in jobs:
        raise HTTPException(status_code=404, detail="Import job not found")
    return _status(job_id)


@app.post("/imports/{job_id}/acknowledge", response_model=ImportStatusResponse)
def acknowledge_import(job_id: str):
    """Acknowledge the import summary (runs completion callbacks once)."""
    if job_id not in jobs:
        raise HTTPException(status_code=404, detail="Import job not found")
    job = jobs[job_id]
    if job.state is not ImportState.SUCCEEDED:
        raise HTTPException(status_code=409, detail=f"Import has no summary yet (state: {job.state.value})")
    job.acknowledge_summary()
    return _status(job_id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
