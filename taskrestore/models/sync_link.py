"""SyncLink data model for taskrestore."""

from pydantic import BaseModel, Field


class SyncLink(BaseModel):
    """Links a local task to a task/series/list triple on a remote sync service."""

    task_id: str = Field(..., description="Local task id (must already be persisted)")
    service: str = Field(..., description="Remote service name (e.g. 'rtm')")
    remote_task_id: int = Field(..., description="Remote task id")
    remote_series_id: int = Field(..., description="Remote task-series id")
    remote_list_id: int = Field(..., description="Remote list id")
    repeating: bool = Field(False, description="Whether the remote task repeats on completion")
