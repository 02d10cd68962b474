"""Job record data models as returned by the bsub.io API."""

from datetime import datetime
from enum import Enum
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class JobStatus(str, Enum):
    CREATED = "created"
    LOADED = "loaded"
    PENDING = "pending"
    CLAIMED = "claimed"
    PREPARING = "preparing"
    PROCESSING = "processing"
    FINISHED = "finished"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


# Exactly the two states no job ever leaves.
TERMINAL_STATUSES = frozenset({JobStatus.FINISHED, JobStatus.FAILED})
_STATUS_VALUES = frozenset(s.value for s in JobStatus)


def is_terminal(status: Optional[JobStatus]) -> bool:
    """True iff the status is finished or failed. A missing status is not terminal."""
    return status is not None and status in TERMINAL_STATUSES


class Job(BaseModel):
    """Read-only snapshot of a job record owned by the remote service."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    id: UUID
    type: str
    status: Optional[JobStatus] = None
    upload_token: Optional[str] = None
    data_size: Optional[int] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    user_id: Optional[str] = None
    claimed_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def unknown_status_as_waypoint(cls, value):
        # Statuses added server side are treated as opaque waypoints.
        if isinstance(value, str) and value not in _STATUS_VALUES:
            return None
        return value

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)


class JobEnvelope(BaseModel):
    """`{"data": job, "success": true}` wrapper used by the job endpoints."""
    data: Optional[Job] = None
    success: bool = True


class UploadReceipt(BaseModel):
    data_size: Optional[int] = None
    message: Optional[str] = None


class JobList(BaseModel):
    jobs: List[Job] = Field(default_factory=list)
    total: int = 0


class JobListEnvelope(BaseModel):
    data: Optional[JobList] = None
    success: bool = True


class ProcessingType(BaseModel):
    name: str
    description: str = ""


class TypesResponse(BaseModel):
    types: List[ProcessingType] = Field(default_factory=list)


class JobResult(BaseModel):
    """Final job snapshot plus whatever output and logs could be retrieved."""
    job: Job
    output: bytes = b""
    logs: str = ""
