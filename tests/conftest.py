import json
import pathlib
import types

import pytest

from airtable_records import Client

TESTDATA = pathlib.Path(__file__).parent / "testdata"


def load_fixture(name: str) -> bytes:
    return (TESTDATA / name).read_bytes()


class FakeResponse:
    def __init__(self, status_code: int = 200, body=b"{}"):
        self.status_code = status_code
        if not isinstance(body, (bytes, str)):
            body = json.dumps(body)
        self.content = body.encode() if isinstance(body, str) else body
        self.request = types.SimpleNamespace()


class FakeAsyncClient:
    """Returns a sequence of responses (or raises exceptions) for each call to request()."""
    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []
        self.closed = False

    async def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self._responses:
            raise RuntimeError("No more fake responses")
        resp = self._responses.pop(0)
        if isinstance(resp, Exception):
            raise resp
        return resp

    async def aclose(self):
        self.closed = True


class FakeLimiter:
    def __init__(self):
        self.takes = 0

    async def take(self):
        self.takes += 1
        return 0.0


@pytest.fixture
def make_client():
    def _make(*responses, **kwargs):
        http = FakeAsyncClient(responses)
        kwargs.setdefault("limiter", FakeLimiter())
        client = Client(api_key="key123", base_id="appXXX", http=http, **kwargs)
        return client, http
    return _make


@pytest.fixture(autouse=True)
def _clear_no_limit(monkeypatch):
    monkeypatch.delenv("AIRTABLE_NO_LIMIT", raising=False)

