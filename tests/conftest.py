"""
Shared fixtures for the bsubio test suite.

Provides: the in-memory mock service, clients wired to it, hand-written
httpx.MockTransport servers and job payload builders.

Set BSUBIO_TEST_MODE=production to run the end-to-end tests against the real
service with the key from ~/.config/bsubio/config.json.
"""

import os
import uuid
from datetime import datetime, timezone
from typing import Callable, List

import httpx
import pytest

from bsubio.client import BsubClient
from bsubio.config import load_user_config
from bsubio.testing.mock_server import MockJobServer

TEST_API_KEY = "test-api-key"
TEST_BASE_URL = "http://mock.bsub.io"
FAST_POLL = 0.01


def make_job_payload(status: str = "created", **overrides) -> dict:
    """JSON job as the service returns it."""
    now = datetime.now(timezone.utc).isoformat()
    job = {
        "id": str(uuid.uuid4()),
        "type": "pandoc_md",
        "status": status,
        "data_size": 1024,
        "upload_token": "test-upload-token",
        "user_id": "test-user-id",
        "created_at": now,
        "updated_at": now,
    }
    job.update(overrides)
    return job


def job_response(status_code: int = 200, **job_fields) -> httpx.Response:
    return httpx.Response(status_code, json={"data": make_job_payload(**job_fields), "success": True})


class RecordingHandler:
    """Wraps a handler function and remembers every request it saw."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self._handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    @property
    def paths(self) -> List[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]


@pytest.fixture
def mock_server() -> MockJobServer:
    return MockJobServer(api_key=TEST_API_KEY)


@pytest.fixture
def client(mock_server) -> BsubClient:
    """Client talking to the in-memory mock service."""
    return BsubClient(
        api_key=TEST_API_KEY,
        base_url=TEST_BASE_URL,
        http_client=mock_server.http_client(TEST_BASE_URL),
        poll_interval=FAST_POLL,
    )


@pytest.fixture
def transport_client() -> Callable[..., BsubClient]:
    """Factory: client backed by an httpx.MockTransport around `handler`."""

    def _build(handler, poll_interval: float = FAST_POLL) -> BsubClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return BsubClient(
            api_key=TEST_API_KEY,
            base_url=TEST_BASE_URL,
            http_client=http,
            poll_interval=poll_interval,
        )

    return _build


@pytest.fixture
def e2e_client(client) -> BsubClient:
    """Mock-backed client by default; the real service in production mode."""
    if os.environ.get("BSUBIO_TEST_MODE") != "production":
        return client

    config = load_user_config()
    if not config.get("api_key"):
        pytest.skip("Skipping production test: no API key in ~/.config/bsubio/config.json")
    return BsubClient(api_key=config["api_key"], base_url=config.get("base_url") or "https://app.bsub.io")
