"""
Pytest configuration and shared fixtures for the SDK tests.
"""
import hashlib
import hmac
import json
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

from oak_sdk.core.config import OakConfig
from oak_sdk.core.retry import RetryOptions

BASE_URL = "https://api.test.oak"


class FakeClock:
    """Manually advanced clock returning epoch milliseconds."""

    def __init__(self, start: float = 1_700_000_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingSleep:
    """Async stand-in for asyncio.sleep that records requested durations."""

    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def json_response(status: int, body: Any, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    return httpx.Response(status, content=json.dumps(body).encode(), headers=headers)


def reply(status: int, body: Any = None, headers: Optional[Dict[str, str]] = None):
    """Factory building a fresh JSON response for every request it serves."""
    return lambda request: json_response(status, {} if body is None else body, headers)


def sign(payload: str, secret: str) -> str:
    return hmac.new(secret.encode(), payload.encode(), hashlib.sha256).hexdigest()


class Router:
    """
    Queue-based handler for httpx.MockTransport.

    Each (method, path) has a list of responses served in order; the last
    one repeats once the queue is down to a single entry.
    """

    def __init__(self) -> None:
        self.routes: Dict[tuple, List[Callable[[httpx.Request], httpx.Response]]] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, *handlers: Callable[[httpx.Request], httpx.Response]) -> None:
        self.routes.setdefault((method, path), []).extend(handlers)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handlers = self.routes.get((request.method, request.url.path))
        if not handlers:
            return json_response(404, {"msg": f"no route for {request.method} {request.url.path}"})
        handler = handlers.pop(0) if len(handlers) > 1 else handlers[0]
        return handler(request)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def router():
    return Router()


@pytest.fixture
def async_http(router):
    return httpx.AsyncClient(transport=httpx.MockTransport(router))


@pytest.fixture
def config():
    return OakConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        base_url=BASE_URL,
        environment="sandbox",
        retry_options=RetryOptions(max_number_of_retries=0, delay=1, max_delay=10),
    )


@pytest.fixture
def token_route(router):
    def _add(*bodies: Dict[str, Any]) -> None:
        router.add(
            "POST",
            "/api/v1/merchant/token/grant",
            *[reply(200, body) for body in bodies],
        )

    return _add
