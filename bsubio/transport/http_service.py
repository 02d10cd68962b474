"""HTTP implementation of JobService on top of httpx."""

import asyncio
from typing import Optional
from uuid import UUID

import httpx

from bsubio.jobs.service import JobService, UploadBody


class HttpJobService(JobService):
    """Talks to the bsub.io REST API, adding the bearer credential to every call.

    The httpx client may be shared between services (and between concurrent
    workflows); it is only closed here when this service created it.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {api_key}"}
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    def _url(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = {**self._headers, **kwargs.pop("headers", {})}
        return await self._http.request(method, self._url(path), headers=headers, **kwargs)

    async def create_job(self, job_type: str) -> httpx.Response:
        return await self._request("POST", "/v1/jobs", json={"type": job_type})

    async def upload_data(
        self,
        job_id: UUID,
        token: str,
        data: UploadBody,
        content_type: Optional[str] = None,
    ) -> httpx.Response:
        params = {"token": token}
        path = f"/v1/upload/{job_id}"
        # File objects are read in a worker thread so the event loop keeps
        # serving other workflows; the payload is held in memory.
        body = data if isinstance(data, bytes) else await asyncio.to_thread(data.read)
        if content_type is None:
            files = {"file": ("upload", body, "application/octet-stream")}
            return await self._request("POST", path, params=params, files=files)

        return await self._request(
            "POST", path, params=params, content=body,
            headers={"Content-Type": content_type},
        )

    async def submit_job(self, job_id: UUID) -> httpx.Response:
        return await self._request("POST", f"/v1/jobs/{job_id}/submit")

    async def get_job(self, job_id: UUID) -> httpx.Response:
        return await self._request("GET", f"/v1/jobs/{job_id}")

    async def get_output(self, job_id: UUID) -> httpx.Response:
        return await self._request("GET", f"/v1/jobs/{job_id}/output")

    async def get_logs(self, job_id: UUID) -> httpx.Response:
        return await self._request("GET", f"/v1/jobs/{job_id}/logs")

    async def list_jobs(
        self,
        status: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> httpx.Response:
        params = {
            k: v for k, v in {"status": status, "limit": limit, "offset": offset}.items()
            if v is not None
        }
        return await self._request("GET", "/v1/jobs", params=params)

    async def cancel_job(self, job_id: UUID) -> httpx.Response:
        return await self._request("POST", f"/v1/jobs/{job_id}/cancel")

    async def delete_job(self, job_id: UUID) -> httpx.Response:
        return await self._request("DELETE", f"/v1/jobs/{job_id}")

    async def get_types(self) -> httpx.Response:
        return await self._request("GET", "/v1/types")

    async def get_version(self) -> httpx.Response:
        return await self._request("GET", "/v1/version")

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()
