"""Pytest configuration - loads .env for live tests and provides a network spy."""

import email.message
import io
import json
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from photoshelter import PhotoShelterV3, PhotoShelterV4

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


class FakeResponse:
    """Stands in for the object urlopen() returns on a 2xx response."""

    def __init__(self, status: int, reason: str, body: bytes):
        self.status = status
        self.reason = reason
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None


class NetworkSpy:
    """Records every urlopen() call and answers from a queue of canned responses."""

    def __init__(self):
        self.requests: list[urllib.request.Request] = []
        self.timeouts: list[float | None] = []
        self._responses: list[Any] = []

    def respond(self, status: int = 200, body: Any = None, reason: str = "OK") -> None:
        """Queue a response. dict/list bodies are JSON-encoded, str is UTF-8 encoded."""
        if isinstance(body, (dict, list)):
            raw = json.dumps(body).encode("utf-8")
        elif isinstance(body, str):
            raw = body.encode("utf-8")
        else:
            raw = body or b""
        self._responses.append((status, reason, raw))

    def fail(self, error: Exception) -> None:
        """Queue a transport-level failure."""
        self._responses.append(error)

    @property
    def last(self) -> urllib.request.Request:
        return self.requests[-1]

    def __call__(self, req: urllib.request.Request, timeout: float | None = None) -> FakeResponse:
        self.requests.append(req)
        self.timeouts.append(timeout)
        queued = self._responses.pop(0) if self._responses else (200, "OK", b"{}")
        if isinstance(queued, Exception):
            raise queued
        status, reason, raw = queued
        if status >= 400:
            raise urllib.error.HTTPError(req.full_url, status, reason, email.message.Message(), io.BytesIO(raw))
        return FakeResponse(status, reason, raw)


@pytest.fixture
def network(monkeypatch) -> NetworkSpy:
    """Replace urllib.request.urlopen with a recording spy."""
    spy = NetworkSpy()
    monkeypatch.setattr(urllib.request, "urlopen", spy)
    return spy


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep a developer's PHOTOSHELTER_* variables out of the unit tests."""
    monkeypatch.delenv("PHOTOSHELTER_BASE_URL", raising=False)


@pytest.fixture
def v4(network) -> PhotoShelterV4:
    return PhotoShelterV4(api_key="test-key")


@pytest.fixture
def v3(network) -> PhotoShelterV3:
    return PhotoShelterV3(api_key="test-key")


@pytest.fixture
def logged_in_v4(v4, network) -> PhotoShelterV4:
    network.respond(body={"token": "tok-v4", "org_id": "O123", "two_factor_required": False})
    v4.auth.login("me@example.com", "secret")
    return v4


@pytest.fixture
def logged_in_v3(v3, network) -> PhotoShelterV3:
    network.respond(body={"status": "ok", "data": {"token": "tok-v3"}})
    v3.auth.login("me@example.com", "secret")
    return v3
