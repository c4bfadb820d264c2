"""Pytest configuration and shared fixtures."""
import json

import httpx
import pytest


SUCCESS_BODY = json.dumps({
    "choices": [{"message": {"content": "hi"}}],
    "usage": {"completion_tokens": 1, "prompt_tokens": 2, "total_tokens": 3},
})

ERROR_BODY = json.dumps({"error": {"message": "bad key"}})


@pytest.fixture
def success_body():
    """Return a minimal successful chat-completion body."""
    return SUCCESS_BODY


@pytest.fixture
def error_body():
    """Return an API error body such as an invalid key produces."""
    return ERROR_BODY


class ScriptedTransport:
    """Fake transport that plays back a list of outcomes, one per request.

    Each outcome is either a response body (str), an (status, body) tuple,
    or an exception class from httpx to raise.
    """

    def __init__(self, outcomes):
        self._outcomes = list(outcomes)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome = self._outcomes.pop(0) if self._outcomes else httpx.ConnectError
        if isinstance(outcome, type) and issubclass(outcome, Exception):
            raise outcome("scripted failure", request=request)
        if isinstance(outcome, tuple):
            status, body = outcome
            return httpx.Response(status, text=body)
        return httpx.Response(200, text=outcome)

    @property
    def calls(self) -> int:
        return len(self.requests)


@pytest.fixture
def scripted_client():
    """Build an httpx.Client backed by a ScriptedTransport.

    Returns a factory: scripted_client([outcomes...]) -> (client, transport).
    """
    clients = []

    def _make(outcomes):
        transport = ScriptedTransport(outcomes)
        client = httpx.Client(transport=httpx.MockTransport(transport))
        clients.append(client)
        return client, transport

    yield _make

    for client in clients:
        client.close()


class FakeSleep:
    """Records requested delays instead of waiting."""

    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_sleep():
    return FakeSleep()
