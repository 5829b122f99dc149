from unittest.mock import MagicMock

import pytest

from student_portal.api.client import APIClient
from student_portal.services.auth_service import AuthService
from student_portal.state.store import MemorySessionStore

HOUR_MS = 60 * 60 * 1000
T0 = 1_700_000_000_000


class FakeClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


def make_response(status=200, body=None, text=None):
    r = MagicMock()
    r.status_code = status
    r.ok = 200 <= status < 300
    if body is None:
        r.json.side_effect = ValueError("no json")
        r.text = text or ""
    else:
        r.json.return_value = body
    return r


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def http():
    return MagicMock()


@pytest.fixture
def client(http):
    return APIClient(base_url="http://portal.test", timeout=5, session=http)


@pytest.fixture
def auth(client, store, clock):
    return AuthService(client, store, clock=clock)
