"""
X-Recruit CLI - Test Configuration and Fixtures
"""
from typing import Any, Dict

import pytest
from jose import jwt

from cli.session import SessionClient, MemorySessionStorage, FileSessionStorage

# The client never verifies signatures, any key will do
SIGNING_KEY = "client-tests-only"

NOW = 1_700_000_000


def make_token(exp_offset: int = 86400, **claims: Any) -> str:
    payload = {
        "userId": 1,
        "email": "a@b.com",
        "firstName": "Jo",
        "lastName": "Li",
        "userType": "student",
        "iat": NOW,
        "exp": NOW + exp_offset,
    }
    payload.update(claims)
    return jwt.encode(payload, SIGNING_KEY, algorithm="HS256")


@pytest.fixture
def user() -> Dict[str, Any]:
    return {
        "id": 1,
        "email": "a@b.com",
        "firstName": "Jo",
        "lastName": "Li",
        "userType": "student",
    }


@pytest.fixture
def clock():
    """Mutable fake clock starting at NOW"""
    class FakeClock:
        now = NOW

        def __call__(self) -> float:
            return self.now

    return FakeClock()


@pytest.fixture
def memory_session(clock) -> SessionClient:
    return SessionClient(MemorySessionStorage(), clock=clock)


@pytest.fixture
def session_path(tmp_path):
    return tmp_path / "xrecruit" / "session.json"


@pytest.fixture
def file_session(session_path, clock) -> SessionClient:
    return SessionClient(FileSessionStorage(str(session_path)), clock=clock)


@pytest.fixture
def token() -> str:
    return make_token()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep CLIConfig defaults away from the real ~/.xrecruit"""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.setenv("XRECRUIT_CONFIG_DIR", str(tmp_path / "home" / ".xrecruit"))
    for var in ("XRECRUIT_API_URL", "XRECRUIT_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def token_factory():
    return make_token
