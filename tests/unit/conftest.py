"""Unit test conftest: a recording Graph transport and pipeline fixtures."""

import json
import os
from typing import Any, Callable, List, Optional, Tuple

# Keep test output plain regardless of the developer's environment
os.environ.setdefault("GRAPHDRIVE_LOCAL_DEVELOPMENT", "false")

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from graphdrive.http_client.graph_api import GraphAPI  # noqa: E402
from graphdrive.schemas.auth import CredentialPair  # noqa: E402

ROOT_URL = "https://graph.microsoft.com/v1.0"

EXPIRED_BODY = {
    "error": {
        "code": "InvalidAuthenticationToken",
        "message": "Access token has expired or is not yet valid. code: 80049228",
    }
}


class GraphRecorder:
    """Records requests and replays queued responses in order.

    A handler can be set instead of a queue when the response depends on the
    request (e.g. on the bearer token).
    """

    def __init__(self):
        """Initialize an empty recorder."""
        self.requests: List[httpx.Request] = []
        self._responses: List[Tuple[int, Any]] = []
        self.handler: Optional[Callable[[httpx.Request], httpx.Response]] = None

    def queue(self, status: int = 200, body: Any = None) -> "GraphRecorder":
        """Queue a response."""
        self._responses.append((status, body))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        assert self._responses, f"Unexpected request: {request.method} {request.url}"
        status, body = self._responses.pop(0)
        if body is None:
            return httpx.Response(status)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    def json_body(self, index: int = -1) -> Any:
        """Decoded JSON body of a recorded request."""
        return json.loads(self.requests[index].content)

    def bearer(self, index: int = -1) -> str:
        """Bearer token of a recorded request."""
        return self.requests[index].headers["Authorization"].removeprefix("Bearer ")


@pytest.fixture
def recorder():
    """Create a recording transport."""
    return GraphRecorder()


@pytest_asyncio.fixture
async def http_client(recorder):
    """Create an httpx client backed by the recorder."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    yield client
    await client.aclose()


@pytest.fixture
def credentials():
    """Create an initial credential pair."""
    return CredentialPair(access_token="old-access", refresh_token="old-refresh")


@pytest.fixture
def new_credentials():
    """Create the credential pair a refresh hands out."""
    return CredentialPair(access_token="new-access", refresh_token="new-refresh")


@pytest.fixture
def graph_api(credentials, http_client):
    """Create a pipeline without refresh capability."""
    return GraphAPI(credentials, http_client=http_client, root_url=ROOT_URL)
