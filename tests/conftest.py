"""Pytest configuration and fixtures."""
import json

import pytest
import requests

from replicate_client.client import ReplicateClient


def make_response(status_code=200, payload=None, text=None, url="https://api.example.com/v1/"):
    """Build a real requests.Response with a JSON (or raw text) body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.encoding = "utf-8"
    if text is not None:
        response._content = text.encode("utf-8")
    else:
        response._content = json.dumps(payload if payload is not None else {}).encode("utf-8")
    return response


class FakeSession:
    """Stand-in for requests.Session that replays scripted responses.

    Each call to ``request`` pops the next scripted item. An exception
    instance is raised instead of returned.
    """

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return ReplicateClient("r8_test_token", base_url="https://api.example.com/v1/", session=session)


@pytest.fixture
def sleeps(monkeypatch):
    """Record poll sleeps instead of sleeping."""
    calls = []
    monkeypatch.setattr("replicate_client.client.time.sleep", calls.append)
    return calls


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run from an empty directory with no Replicate variables set."""
    for key in (
        "REPLICATE_API_TOKEN",
        "REPLICATE_BASE_URL",
        "REPLICATE_TIMEOUT",
        "REPLICATE_POLL_INTERVAL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path
