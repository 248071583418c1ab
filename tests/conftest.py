"""Shared fixtures: a recording stub of the BLT API behind httpx.MockTransport."""

import json
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import Any

import httpx
import pytest
import pytest_asyncio

from blt_mcp.client import BLTClient
from blt_mcp.config import ServerConfig

API_BASE = "https://blt.test/api"
API_KEY = "test-key"

Route = Callable[[httpx.Request], Any]


@dataclass
class RecordedCall:
    method: str
    path: str
    body: Any
    headers: httpx.Headers


class StubAPI:
    """Fake BLT API that records every outbound call."""

    def __init__(self) -> None:
        self.calls: list[RecordedCall] = []
        self.routes: dict[tuple[str, str], Route] = {}

    def respond(self, method: str, path: str, status: int = 200, **kwargs: Any) -> None:
        """Answer ``method path`` with a fresh response built from ``kwargs``."""
        self.routes[(method, path)] = lambda request: httpx.Response(status, **kwargs)

    def respond_with(self, method: str, path: str, route: Route) -> None:
        self.routes[(method, path)] = route

    def handler(self, request: httpx.Request) -> Any:
        path = request.url.path.removeprefix("/api")
        body = json.loads(request.content) if request.content else None
        self.calls.append(RecordedCall(request.method, path, body, request.headers))

        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(200, json={"ok": True})
        return route(request)


@pytest.fixture
def config() -> ServerConfig:
    return ServerConfig(api_base=API_BASE, api_key=API_KEY, timeout_seconds=0.2)


@pytest.fixture
def api() -> StubAPI:
    return StubAPI()


@pytest_asyncio.fixture
async def client(config: ServerConfig, api: StubAPI) -> AsyncIterator[BLTClient]:
    blt_client = BLTClient(config, transport=httpx.MockTransport(api.handler))
    yield blt_client
    await blt_client.close()
