"""Pytest configuration and fixtures"""
import os
from typing import Callable, Generator

# Settings are read at import time; the app must see signing config before it loads
os.environ.setdefault("JWT_SECRET_KEY", "test-signing-key-0123456789abcdef0123456789")
os.environ.setdefault("JWT_ISSUER", "TokenGateTests")
os.environ.setdefault("JWT_AUDIENCE", "TokenGateTestClients")

import pytest
from fastapi.testclient import TestClient

from tokengate.api.deps import get_services
from tokengate.config import Settings, TokenConfig, load_token_config
from tokengate.errors import LedgerUnavailableError
from tokengate.ledger import InMemorySessionLedger
from tokengate.main import app
from tokengate.middleware.rate_limit import limiter
from tokengate.services import TokenServices, build_services


class FakeClock:
    """Manually advanced monotonic clock for ledger TTL tests"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class BrokenLedger(InMemorySessionLedger):
    """Ledger whose backing store is down"""

    def _fail(self, operation: str):
        raise LedgerUnavailableError(operation, ConnectionError("connection refused"))

    def activate(self, jti, username, ttl):
        self._fail("activate")

    def revoke(self, jti, ttl):
        self._fail("revoke")

    def snapshot(self, jti, username):
        self._fail("snapshot")

    def ping(self):
        self._fail("ping")


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        JWT_SECRET_KEY="test-signing-key-0123456789abcdef0123456789",
        JWT_ISSUER="TokenGateTests",
        JWT_AUDIENCE="TokenGateTestClients",
        SESSION_LIFETIME_SECONDS=28800,
    )


@pytest.fixture
def token_config(test_settings: Settings) -> TokenConfig:
    return load_token_config(test_settings)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ledger(clock: FakeClock) -> InMemorySessionLedger:
    return InMemorySessionLedger(sweep_interval=60, clock=clock)


@pytest.fixture
def services(test_settings: Settings, ledger: InMemorySessionLedger) -> TokenServices:
    return build_services(test_settings, ledger=ledger)


@pytest.fixture(scope="function")
def client(services: TokenServices) -> Generator[TestClient, None, None]:
    """Create test client with a fresh ledger for each test"""
    app.dependency_overrides[get_services] = lambda: services
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def broken_client(test_settings: Settings) -> Generator[TestClient, None, None]:
    """Test client whose session ledger is unreachable"""
    broken = build_services(test_settings, ledger=BrokenLedger())
    app.dependency_overrides[get_services] = lambda: broken
    limiter.reset()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def login(client: TestClient) -> Callable[..., str]:
    """Log in through the API and return the bearer token"""

    def _login(username: str = "admin", password: str = "admin123") -> str:
        response = client.post("/api/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _login


@pytest.fixture
def bearer() -> Callable[[str], dict]:
    """Build Authorization headers for a bearer token"""

    def _bearer(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return _bearer
