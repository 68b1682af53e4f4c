"""Pytest configuration and fixtures."""

import httpx
import pytest

from parlaid.config import Config, set_config
from parlaid.models.credentials import Credentials
from parlaid.output.console import BufferOutput
from parlaid.utils.rate_limiter import RateLimiter

START_MS = 1_700_000_000_000.0


class FakeClock:
    """Millisecond clock that only moves when the fake sleep is awaited."""

    def __init__(self, start: float = START_MS):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds * 1000


class FakeApi:
    """Serves queued JSON responses per path through httpx.MockTransport."""

    def __init__(self, clock: FakeClock | None = None):
        self.clock = clock
        self.routes: dict[str, list[tuple[int, object, dict]]] = {}
        self.requests: list[httpx.Request] = []
        self.request_times: list[float] = []

    def add(self, path: str, *bodies, status: int = 200, headers: dict | None = None):
        queue = self.routes.setdefault(path, [])
        for body in bodies:
            queue.append((status, body, headers or {}))
        return self

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.clock is not None:
            self.request_times.append(self.clock())
        queue = self.routes.get(request.url.path)
        if not queue:
            return httpx.Response(404, json={"message": "Not found"})
        status, body, headers = queue.pop(0)
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body, headers=headers)
        return httpx.Response(status, json=body, headers=headers)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture(autouse=True)
def reset_globals():
    """Reset global state before each test."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture
def test_config():
    """Create a test configuration."""
    config = Config(base_url="https://api.parler.test/", origin="https://parler.test")
    set_config(config)
    return config


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def rate_limiter(clock):
    """Rate limiter on the fake clock with a fixed jitter byte of 64 (0.25s)."""
    return RateLimiter(clock=clock, sleep=clock.sleep, random_bytes=lambda n: bytes([64] * n))


@pytest.fixture
def credentials():
    return Credentials(mst="mst=abc/123", jst="jst=xyz")


@pytest.fixture
def api(clock):
    return FakeApi(clock)


@pytest.fixture
def buffer():
    return BufferOutput()
