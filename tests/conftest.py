import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

import pytest
from fastapi.testclient import TestClient

from gatepage.app import create_app
from gatepage.auth.flow import AuthFlow
from gatepage.auth.passwords import build_hasher
from gatepage.auth.session import SessionTokens
from gatepage.auth.users import MemoryUserStore
from gatepage.config import Settings

SECRET = "test-secret-not-for-production"
T0 = 1_700_000_000


class FakeClock:
    """Manually advanced replacement for time.time()."""

    def __init__(self, now: float = T0) -> None:
        self.now = float(now)

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def settings() -> Settings:
    # Lowest argon2 time cost keeps the suite fast.
    return Settings(database_url="memory://", secret_key=SECRET, hash_time_cost=1)


@pytest.fixture()
def store() -> MemoryUserStore:
    return MemoryUserStore()


@pytest.fixture()
def tokens(clock) -> SessionTokens:
    return SessionTokens(SECRET, clock=clock)


@pytest.fixture()
def flow(store, tokens) -> AuthFlow:
    return AuthFlow(store, tokens, build_hasher(1))


@pytest.fixture()
def client(settings, store, clock):
    app = create_app(settings, store=store, clock=clock)
    with TestClient(app) as c:
        yield c
