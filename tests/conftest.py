"""Shared pytest fixtures and fakes."""

import httpx
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa

from einsteinbot.cache.memory import InMemoryCache
from einsteinbot.client.model import RequestConfig

LOGIN_ENDPOINT = "https://login.example.com"
FORCE_ENDPOINT = "https://org.my.example.com"
RUNTIME_URL = "https://runtime.example.com"


class FakeServer:
    """Answers requests from a (method, path) routing table and records them."""

    def __init__(self):
        self.routes: dict[tuple[str, str], tuple] = {}
        self.requests: list[httpx.Request] = []

    def add(self, method: str, path: str, status: int = 200, json=None, headers=None):
        self.routes[(method, path)] = (status, json, headers)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"status": 404, "message": "no route"})
        status, body, headers = route
        return httpx.Response(status, json=body, headers=headers)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


class RecordingCache(InMemoryCache):
    """InMemoryCache that remembers every write."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.writes: list[tuple[str, str, int | None]] = []

    async def set(self, key, value, ttl_seconds=None):
        self.writes.append((key, value, ttl_seconds))
        await super().set(key, value, ttl_seconds)


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def request_config():
    return RequestConfig(bot_id="0XxBOT", org_id="00DORG", force_config_endpoint=FORCE_ENDPOINT)
