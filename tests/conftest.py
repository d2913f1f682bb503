"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Union

import httpx
import pytest

from slide_mcp.server import MCPServer
from slide_mcp_server.backend import BackendClient
from slide_mcp_server.tools import build_registry

BASE_URL = "https://api.slide.test"


@pytest.fixture()
def anyio_backend() -> str:
    # The server is built on asyncio streams and tasks; run async tests there only.
    return "asyncio"
Responder = Callable[[httpx.Request], Union[httpx.Response, Awaitable[httpx.Response]]]


class FakeSlideAPI:
    """In-memory stand-in for the Slide REST API.

    Routes are keyed by ``(method, path)``; unknown routes answer 404 with the
    API's error body. Every request is recorded for later assertions.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Responder] = {}

    def add(
        self, method: str, path: str, *, status: int = 200, json: Any = None
    ) -> None:
        def respond(_: httpx.Request) -> httpx.Response:
            if json is None:
                return httpx.Response(status)
            return httpx.Response(status, json=json)

        self._routes[(method, path)] = respond

    def add_responder(self, method: str, path: str, responder: Responder) -> None:
        self._routes[(method, path)] = responder

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self._routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"message": "Not found"})
        response = responder(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def backend(self) -> BackendClient:
        return BackendClient(
            "test-key", base_url=BASE_URL, transport=httpx.MockTransport(self.handle)
        )


@pytest.fixture()
def slide_api() -> FakeSlideAPI:
    """Provide an empty fake API."""
    return FakeSlideAPI()


@pytest.fixture()
def mcp_server(slide_api: FakeSlideAPI) -> MCPServer:
    """Provide a dispatcher with every tool wired to the fake API."""
    return MCPServer(build_registry(), slide_api.backend())


@pytest.fixture()
def two_devices() -> dict[str, Any]:
    """A list-devices response holding two devices."""
    return {
        "pagination": {"total": 2, "next_offset": None},
        "data": [
            {
                "device_id": "d_111111111111",
                "hostname": "slide-a",
                "display_name": "Front Office",
            },
            {
                "device_id": "d_222222222222",
                "hostname": "slide-b",
                "display_name": "",
            },
        ],
    }
