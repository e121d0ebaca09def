from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Union

import httpx
import pytest
import pytest_asyncio

from videosummary import ClientSettings, VideoSummaryClient
from videosummary.services.http import ServiceTransport


BASE_URL = "https://api.test"

Handler = Union[Callable[[httpx.Request], httpx.Response], List[httpx.Response], httpx.Response]


class FakeService:
    """Routes requests by (method, url without query) to canned responses and records them."""

    def __init__(self) -> None:
        self.routes: Dict[tuple, Handler] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method, url)] = handler

    def add_json(self, method: str, url: str, *bodies: Any, status: int = 200) -> None:
        responses = [httpx.Response(status, json=b) for b in bodies]
        self.add(method, url, responses if len(responses) > 1 else responses[0])

    def calls(self, method: str, url: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and _route(r.url) == url]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, _route(request.url))
        handler = self.routes.get(key)
        if handler is None:
            return httpx.Response(404, json={"error": f"no route for {key}"})
        if isinstance(handler, list):
            # consume in order, keep replaying the last one
            return _fresh(handler.pop(0) if len(handler) > 1 else handler[0])
        if isinstance(handler, httpx.Response):
            return _fresh(handler)
        return handler(request)


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content.decode("utf-8"))


@pytest.fixture
def service() -> FakeService:
    return FakeService()


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(
        api_key="test-key",
        base_url=BASE_URL,
        poll_interval_seconds=0,
        max_poll_attempts=None,
        upload_chunk_size=4,
    )


@pytest_asyncio.fixture
async def client(service, settings):
    http = httpx.AsyncClient(transport=httpx.MockTransport(service))
    sdk = VideoSummaryClient(settings=settings, http_client=http)
    yield sdk
    await http.aclose()


def _route(url: httpx.URL) -> str:
    return str(url).split("?", 1)[0]


def _fresh(response: httpx.Response) -> httpx.Response:
    # canned responses are replayed; hand the client a new object each time
    return httpx.Response(response.status_code, headers=response.headers, content=response.content)


@pytest_asyncio.fixture
async def transport(service):
    http = httpx.AsyncClient(transport=httpx.MockTransport(service))
    yield ServiceTransport("test-key", BASE_URL, http)
    await http.aclose()
