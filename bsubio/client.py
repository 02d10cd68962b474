"""bsub.io client: job lifecycle orchestration on top of a JobService.

Typical use::

    async with BsubClient(api_key="...") as client:
        result = await client.process_file("pandoc_md", "document.pdf")
        print(result.output)
"""

from typing import Awaitable, BinaryIO, Callable, List, Optional, Union
from uuid import UUID

import httpx

from bsubio.config import DEFAULT_BASE_URL, Settings, get_settings
from bsubio.exceptions import (
    ApiError,
    BsubError,
    ConfigurationError,
    JobCreationError,
    JobFailedError,
    JobStepError,
    MalformedResponseError,
    ResourceOpenError,
    SubmissionError,
    UploadError,
)
from bsubio.jobs.deadline import Deadline
from bsubio.jobs.models import (
    Job,
    JobList,
    JobListEnvelope,
    JobResult,
    JobStatus,
    ProcessingType,
    TypesResponse,
)
from bsubio.jobs.parsing import parse_job, parse_model
from bsubio.jobs.polling import DEFAULT_POLL_INTERVAL, JobPoller
from bsubio.jobs.results import ResultAssembler
from bsubio.jobs.service import JobService
from bsubio.observability.logger import get_logger
from bsubio.transport.http_service import HttpJobService

logger = get_logger(__name__)

DataSource = Union[bytes, BinaryIO]


class BsubClient:
    """Creates, uploads, submits, waits for and collects bsub.io jobs.

    Every workflow method takes an optional `timeout` in seconds covering
    the whole call; when it elapses the call raises JobCancelledError at
    its next network round trip or polling wait.
    """

    def __init__(
        self,
        api_key: str = "",
        base_url: str = DEFAULT_BASE_URL,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        service: Optional[JobService] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        request_timeout: float = 30.0,
    ):
        if service is None:
            if not api_key:
                raise ConfigurationError("API key is required")
            service = HttpJobService(
                base_url or DEFAULT_BASE_URL,
                api_key,
                http_client=http_client,
                timeout=request_timeout,
            )
        self._service = service
        self._poller = JobPoller(service, interval=poll_interval)
        self._assembler = ResultAssembler(service)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **kwargs) -> "BsubClient":
        """Build a client from environment / user config file settings."""
        settings = settings or get_settings()
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            poll_interval=settings.poll_interval,
            request_timeout=settings.request_timeout,
            **kwargs,
        )

    @property
    def service(self) -> JobService:
        return self._service

    async def aclose(self) -> None:
        await self._service.aclose()

    async def __aenter__(self) -> "BsubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Lifecycle steps
    # ------------------------------------------------------------------

    async def _step(
        self,
        aw: Awaitable[httpx.Response],
        error_cls: Callable[..., JobStepError],
        expected_status: int,
        deadline: Deadline,
        stage: str,
    ) -> httpx.Response:
        """Run one remote call, mapping transport errors and bad statuses to error_cls."""
        try:
            response = await deadline.run(aw, stage)
        except httpx.HTTPError as exc:
            raise error_cls(details={"error": str(exc)}) from exc
        if response.status_code != expected_status:
            raise error_cls(response.status_code, {"body": response.text[:200]})
        return response

    async def _create_and_submit(self, job_type: str, data: DataSource, deadline: Deadline) -> Job:
        response = await self._step(
            self._service.create_job(job_type), JobCreationError, 201, deadline, "create"
        )
        job = parse_job(response, "create")
        if not job.upload_token:
            raise MalformedResponseError("create", {"reason": "no upload token in response"})
        logger.info("Created job %s (type %s)", job.id, job_type)

        await self._step(
            self._service.upload_data(job.id, job.upload_token, data),
            UploadError, 200, deadline, "upload",
        )
        logger.debug("Uploaded data for job %s", job.id)

        await self._step(self._service.submit_job(job.id), SubmissionError, 200, deadline, "submit")
        logger.info("Submitted job %s", job.id)

        # The creation snapshot identifies the job; callers re-fetch for its state.
        return job

    async def create_and_submit(
        self,
        job_type: str,
        data: DataSource,
        timeout: Optional[float] = None,
    ) -> Job:
        """Create a job, upload `data` with the issued token and submit it.

        Returns the snapshot from the creation step (status `created`).

        Raises:
            JobCreationError: create did not answer 201
            UploadError: upload did not answer 200
            SubmissionError: submit did not answer 200
            MalformedResponseError: create answered without job or token
            JobCancelledError: timeout elapsed
        """
        return await self._create_and_submit(job_type, data, Deadline(timeout))

    async def create_and_submit_file(
        self,
        job_type: str,
        path: str,
        timeout: Optional[float] = None,
    ) -> Job:
        """Like create_and_submit, reading the payload from a local file.

        Raises ResourceOpenError before any remote call if the file cannot be opened.
        """
        deadline = Deadline(timeout)
        with _open_source(path) as fh:
            return await self._create_and_submit(job_type, fh, deadline)

    async def wait_for_job(self, job_id: UUID, timeout: Optional[float] = None) -> Job:
        """Poll until the job is finished or failed."""
        return await self._poller.wait_until_terminal(job_id, timeout=timeout)

    async def get_job_result(self, job_id: UUID, timeout: Optional[float] = None) -> JobResult:
        """Fetch the job with its output (if finished) and logs, best effort."""
        return await self._assembler.assemble(job_id, timeout=timeout)

    # ------------------------------------------------------------------
    # Full workflows
    # ------------------------------------------------------------------

    async def _process(self, job_type: str, data: DataSource, deadline: Deadline) -> JobResult:
        job = await self._create_and_submit(job_type, data, deadline)
        finished = await self._poller.wait_until_terminal(job.id, deadline=deadline)

        if finished.status == JobStatus.FAILED:
            logger.info("Job %s failed: %s", job.id, finished.error_message or finished.error_code)
            try:
                partial = await self._assembler.assemble(job.id, deadline=deadline)
            except BsubError as exc:
                logger.debug("Could not assemble result for failed job %s: %s", job.id, exc)
                partial = None
            raise JobFailedError(finished, partial)

        logger.info("Job %s finished", job.id)
        return await self._assembler.assemble(job.id, deadline=deadline)

    async def process(
        self,
        job_type: str,
        data: DataSource,
        timeout: Optional[float] = None,
    ) -> JobResult:
        """Create, upload, submit, wait and collect the result.

        Raises:
            JobFailedError: the job failed remotely; `.result` holds the
                partial result (job metadata, logs) when it could be fetched
            BsubError: any step failed or the timeout elapsed
        """
        return await self._process(job_type, data, Deadline(timeout))

    async def process_file(
        self,
        job_type: str,
        path: str,
        timeout: Optional[float] = None,
    ) -> JobResult:
        """process() for a local file; ResourceOpenError if it cannot be opened."""
        deadline = Deadline(timeout)
        with _open_source(path) as fh:
            return await self._process(job_type, fh, deadline)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    async def _api_call(self, aw: Awaitable[httpx.Response], stage: str) -> httpx.Response:
        try:
            response = await aw
        except httpx.HTTPError as exc:
            raise ApiError(f"failed to {stage}", stage, details={"error": str(exc)}) from exc
        if response.status_code != 200:
            raise ApiError(f"failed to {stage}", stage, response.status_code)
        return response

    async def list_jobs(
        self,
        status: Optional[JobStatus] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> JobList:
        response = await self._api_call(
            self._service.list_jobs(
                status=status.value if status else None, limit=limit, offset=offset
            ),
            "list jobs",
        )
        envelope = parse_model(response, JobListEnvelope, "list jobs")
        return envelope.data or JobList()

    async def cancel_job(self, job_id: UUID) -> None:
        await self._api_call(self._service.cancel_job(job_id), "cancel job")

    async def delete_job(self, job_id: UUID) -> None:
        await self._api_call(self._service.delete_job(job_id), "delete job")

    async def get_types(self) -> List[ProcessingType]:
        response = await self._api_call(self._service.get_types(), "get types")
        return parse_model(response, TypesResponse, "get types").types

    async def get_version(self) -> str:
        response = await self._api_call(self._service.get_version(), "get version")
        try:
            return str(response.json()["version"])
        except (ValueError, KeyError, TypeError) as exc:
            raise MalformedResponseError("get version") from exc


def _open_source(path: str) -> BinaryIO:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise ResourceOpenError(path, {"error": str(exc)}) from exc
