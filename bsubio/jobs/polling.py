"""Fixed-interval polling until a job reaches a terminal state."""

from typing import Optional
from uuid import UUID

import httpx

from bsubio.exceptions import StatusFetchError
from bsubio.jobs.deadline import Deadline
from bsubio.jobs.models import Job
from bsubio.jobs.parsing import parse_job
from bsubio.jobs.service import JobService
from bsubio.observability.logger import get_logger

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 2.0


class JobPoller:
    """Repeatedly fetches a job until it is finished or failed.

    The interval is constant (no backoff). A job that is already terminal
    is returned from the first fetch without waiting.
    """

    def __init__(self, service: JobService, interval: float = DEFAULT_POLL_INTERVAL):
        self._service = service
        self._interval = interval

    @property
    def interval(self) -> float:
        return self._interval

    async def wait_until_terminal(
        self,
        job_id: UUID,
        timeout: Optional[float] = None,
        deadline: Optional[Deadline] = None,
    ) -> Job:
        """Poll `job_id` until terminal.

        Args:
            job_id: Job to watch
            timeout: Seconds before giving up with JobCancelledError
            deadline: Deadline shared with an enclosing workflow (overrides timeout)

        Raises:
            StatusFetchError: the service did not answer 200
            MalformedResponseError: 200 without a job payload
            JobCancelledError: the deadline passed before a terminal status was seen
        """
        deadline = deadline or Deadline(timeout)
        polls = 0
        while True:
            deadline.check("poll")

            try:
                response = await deadline.run(self._service.get_job(job_id), "poll")
            except httpx.HTTPError as exc:
                raise StatusFetchError(details={"job_id": str(job_id), "error": str(exc)}) from exc
            if response.status_code != 200:
                raise StatusFetchError(response.status_code, {"job_id": str(job_id)})

            job = parse_job(response, "poll")
            polls += 1
            logger.debug("Job %s status %s (poll %d)", job_id, job.status, polls)

            if job.is_terminal:
                return job

            await deadline.sleep(self._interval, "poll")
