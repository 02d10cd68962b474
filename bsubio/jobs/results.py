"""Result assembly: job snapshot plus best-effort output and logs."""

from typing import Optional
from uuid import UUID

import httpx

from bsubio.exceptions import JobCancelledError, JobFetchError
from bsubio.jobs.deadline import Deadline
from bsubio.jobs.models import JobResult, JobStatus
from bsubio.jobs.parsing import parse_job
from bsubio.jobs.service import JobService
from bsubio.observability.logger import get_logger

logger = get_logger(__name__)


class ResultAssembler:
    """Builds a JobResult once a job is terminal.

    Only the job fetch is mandatory. Output is requested for finished jobs
    and logs for every job; either one failing, even on an expired deadline,
    just leaves its field empty.
    """

    def __init__(self, service: JobService):
        self._service = service

    async def assemble(
        self,
        job_id: UUID,
        timeout: Optional[float] = None,
        deadline: Optional[Deadline] = None,
    ) -> JobResult:
        deadline = deadline or Deadline(timeout)

        try:
            response = await deadline.run(self._service.get_job(job_id), "fetch")
        except httpx.HTTPError as exc:
            raise JobFetchError(details={"job_id": str(job_id), "error": str(exc)}) from exc
        if response.status_code != 200:
            raise JobFetchError(response.status_code, {"job_id": str(job_id)})
        job = parse_job(response, "fetch")

        result = JobResult(job=job)

        if job.status == JobStatus.FINISHED:
            output = await self._fetch_optional(self._service.get_output(job_id), "output", job_id, deadline)
            if output is not None:
                result.output = output

        logs = await self._fetch_optional(self._service.get_logs(job_id), "logs", job_id, deadline)
        if logs is not None:
            result.logs = logs.decode("utf-8", errors="replace")

        return result

    async def _fetch_optional(self, aw, what: str, job_id: UUID, deadline: Deadline) -> Optional[bytes]:
        try:
            response = await deadline.run(aw, what)
        except httpx.HTTPError as exc:
            logger.debug("Job %s %s unavailable: %s", job_id, what, exc)
            return None
        except JobCancelledError:
            logger.debug("Job %s %s skipped: deadline exceeded", job_id, what)
            return None
        if response.status_code != 200:
            logger.debug("Job %s %s unavailable: status %d", job_id, what, response.status_code)
            return None
        return response.content
