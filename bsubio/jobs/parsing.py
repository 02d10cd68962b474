"""Response payload parsing shared by the orchestrator, poller and assembler."""

from typing import Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from bsubio.exceptions import MalformedResponseError
from bsubio.jobs.models import Job, JobEnvelope

M = TypeVar("M", bound=BaseModel)


def parse_model(response: httpx.Response, model: Type[M], stage: str) -> M:
    """Validate a JSON body into `model`, raising MalformedResponseError."""
    try:
        return model.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise MalformedResponseError(stage, {"reason": str(exc)[:200]}) from exc


def parse_job(response: httpx.Response, stage: str) -> Job:
    """Extract the job from a `{"data": job}` envelope."""
    envelope = parse_model(response, JobEnvelope, stage)
    if envelope.data is None:
        raise MalformedResponseError(stage, {"reason": "missing data"})
    return envelope.data
