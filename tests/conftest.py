"""Shared fixtures for breachwatch tests."""

import json

import pytest

from breachwatch.config import HIBPConfig
from breachwatch.hibp.client import HIBPClient

API_BASE = "https://haveibeenpwned.com/api/v3"


class FakeResponse:
    """Stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, status, body=b""):
        self.status = status
        if isinstance(body, str):
            body = body.encode("utf-8")
        elif not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self.body = body

    async def read(self):
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False


class FakeSession:
    """Records requested URLs and returns a canned response."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(200, "[]")
        self.error = error
        self.urls = []
        self.headers = []
        self.closed = False

    def get(self, url, **kwargs):
        self.urls.append(url)
        self.headers.append(kwargs.get("headers"))
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's HIBP settings out of the tests."""
    for name in ("HIBP_API_KEY", "BREACHWATCH_API_BASE", "BREACHWATCH_USER_AGENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config():
    return HIBPConfig(api_base=API_BASE, user_agent="breachwatch-tests")


@pytest.fixture
def make_client(config):
    """Build a client around a FakeSession returning the given response."""

    def _make(status=200, body="", error=None):
        session = FakeSession(FakeResponse(status, body), error=error)
        return HIBPClient(config=config, session=session), session

    return _make
