"""Job service interface: the remote operations the orchestrator depends on."""

from abc import ABC, abstractmethod
from typing import BinaryIO, Optional, Union
from uuid import UUID

import httpx

UploadBody = Union[bytes, BinaryIO]


class JobService(ABC):
    """Abstract interface to the bsub.io job endpoints (HTTP or fake).

    Every method returns the raw response; interpreting status codes and
    payloads is the caller's job. Transport failures raise httpx.HTTPError.
    """

    @abstractmethod
    async def create_job(self, job_type: str) -> httpx.Response:
        """Register a new job. Success is 201 with the job and its upload token."""
        ...

    @abstractmethod
    async def upload_data(
        self,
        job_id: UUID,
        token: str,
        data: UploadBody,
        content_type: Optional[str] = None,
    ) -> httpx.Response:
        """Attach the payload to a job.

        Without content_type the data is sent as a multipart form with a
        single `file` field; with it, as a raw body of that type.
        """
        ...

    @abstractmethod
    async def submit_job(self, job_id: UUID) -> httpx.Response:
        ...

    @abstractmethod
    async def get_job(self, job_id: UUID) -> httpx.Response:
        ...

    @abstractmethod
    async def get_output(self, job_id: UUID) -> httpx.Response:
        ...

    @abstractmethod
    async def get_logs(self, job_id: UUID) -> httpx.Response:
        ...

    @abstractmethod
    async def list_jobs(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> httpx.Response:
        ...

    @abstractmethod
    async def cancel_job(self, job_id: UUID) -> httpx.Response:
        ...

    @abstractmethod
    async def delete_job(self, job_id: UUID) -> httpx.Response:
        ...

    @abstractmethod
    async def get_types(self) -> httpx.Response:
        ...

    @abstractmethod
    async def get_version(self) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        """Release transport resources. No-op by default."""
        return None
