"""Python client for the bsub.io job-processing service."""

from bsubio.client import BsubClient
from bsubio.config import Settings, get_settings
from bsubio.exceptions import (
    ApiError,
    BsubError,
    ConfigurationError,
    JobCancelledError,
    JobCreationError,
    JobFailedError,
    JobFetchError,
    JobStepError,
    MalformedResponseError,
    ResourceOpenError,
    StatusFetchError,
    SubmissionError,
    UploadError,
)
from bsubio.jobs.models import Job, JobList, JobResult, JobStatus, ProcessingType, is_terminal
from bsubio.jobs.service import JobService
from bsubio.transport.http_service import HttpJobService

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "BsubClient",
    "BsubError",
    "ConfigurationError",
    "HttpJobService",
    "Job",
    "JobCancelledError",
    "JobCreationError",
    "JobFailedError",
    "JobFetchError",
    "JobList",
    "JobResult",
    "JobService",
    "JobStatus",
    "JobStepError",
    "MalformedResponseError",
    "ProcessingType",
    "ResourceOpenError",
    "Settings",
    "StatusFetchError",
    "SubmissionError",
    "UploadError",
    "get_settings",
    "is_terminal",
]
