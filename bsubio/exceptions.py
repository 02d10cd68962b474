"""
Exception hierarchy for the bsub.io client.

Every error raised by the client derives from BsubError and carries a
details dict for debugging. Lifecycle step errors also record which stage
failed and, when the service answered, the HTTP status code.
"""

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from bsubio.jobs.models import Job, JobResult


class BsubError(Exception):
    """Base exception for all bsub.io client errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(BsubError):
    """Raised when the client cannot be built from the given settings."""

    pass


class ResourceOpenError(BsubError):
    """Raised when a local file cannot be opened, before any remote call."""

    def __init__(self, path: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["path"] = path
        super().__init__("failed to open file", details)
        self.path = path


class JobStepError(BsubError):
    """A remote call made on behalf of a lifecycle step did not succeed."""

    def __init__(
        self,
        message: str,
        stage: str,
        status_code: Optional[int] = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Args:
            message: Error message
            stage: Step that failed (create, upload, submit, poll, fetch, ...)
            status_code: HTTP status returned by the service, if any
            details: Additional context
        """
        details = details or {}
        details["stage"] = stage
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.stage = stage
        self.status_code = status_code


class JobCreationError(JobStepError):
    def __init__(self, status_code: Optional[int] = None, details: dict[str, Any] | None = None) -> None:
        super().__init__("failed to create job", "create", status_code, details)


class UploadError(JobStepError):
    def __init__(self, status_code: Optional[int] = None, details: dict[str, Any] | None = None) -> None:
        super().__init__("failed to upload data", "upload", status_code, details)


class SubmissionError(JobStepError):
    def __init__(self, status_code: Optional[int] = None, details: dict[str, Any] | None = None) -> None:
        super().__init__("failed to submit job", "submit", status_code, details)


class StatusFetchError(JobStepError):
    def __init__(self, status_code: Optional[int] = None, details: dict[str, Any] | None = None) -> None:
        super().__init__("failed to get job status", "poll", status_code, details)


class JobFetchError(JobStepError):
    def __init__(self, status_code: Optional[int] = None, details: dict[str, Any] | None = None) -> None:
        super().__init__("failed to get job", "fetch", status_code, details)


class ApiError(JobStepError):
    """Raised by the metadata calls (list, cancel, delete, types, version)."""

    pass


class MalformedResponseError(JobStepError):
    """The service reported success but the payload is missing or unreadable."""

    def __init__(self, stage: str, details: dict[str, Any] | None = None) -> None:
        super().__init__("unexpected response format", stage, None, details)


class JobCancelledError(BsubError):
    """Raised when the caller's deadline expires before the operation completes."""

    def __init__(self, stage: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["stage"] = stage
        super().__init__("operation cancelled: deadline exceeded", details)
        self.stage = stage


class JobFailedError(BsubError):
    """
    The job reached the failed terminal state.

    Carries the final job snapshot and the partial result assembled after
    the failure (None when even that could not be fetched).
    """

    def __init__(self, job: "Job", result: Optional["JobResult"] = None) -> None:
        message = "job failed"
        if job.error_message:
            message = f"job failed: {job.error_message}"
        details: dict[str, Any] = {"job_id": str(job.id)}
        if job.error_code:
            details["error_code"] = job.error_code
        super().__init__(message, details)
        self.job = job
        self.result = result
        self.error_code = job.error_code
        self.error_message = job.error_message
