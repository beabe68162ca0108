"""Shared test fixtures for the snoots test suite."""

import asyncio
import json
from typing import Any
from urllib.parse import parse_qsl

import httpx
import pytest

from snoots.oauth.models import Credentials

USER_AGENT = "test:snoots-tests:v0.1.0 (by /u/snoots_test)"
CLIENT_ID = "cid_test123"
CLIENT_SECRET = "secret_test456"


# ============================================================================
# Fake Reddit
# ============================================================================


class FakeReddit:
    """An httpx.MockTransport handler standing in for Reddit.

    The token endpoint issues "access-1", "access-2", ... for every grant.
    Other endpoints answer from `routes`, keyed by (host, path).
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], dict[str, Any]] = {}
        self.token_response: dict[str, Any] | None = None
        self.refresh_token: str | None = None
        self.expires_in = 3600
        self.grant_count = 0

    def route(
        self,
        host: str,
        path: str,
        body: Any = None,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
    ) -> None:
        response: dict[str, Any] = {"status_code": status_code, "headers": headers}
        if content is not None:
            response["content"] = content
        else:
            response["json"] = body
        self.routes[(host, path)] = response

    def reject_grants(self, body: Any, status_code: int = 200) -> None:
        """Answer every token request with `body` instead of a token."""
        self.token_response = {"status_code": status_code, "json": body}

    @staticmethod
    def form_of(request: httpx.Request) -> dict[str, str]:
        return dict(parse_qsl(request.content.decode()))

    @staticmethod
    def json_of(request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content)

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/v1/access_token"]

    @property
    def grants(self) -> list[dict[str, str]]:
        """Form bodies of all token requests, in order."""
        return [self.form_of(r) for r in self.token_requests]

    @property
    def api_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path != "/api/v1/access_token"]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/v1/access_token":
            # Yield so concurrent callers get a chance to race
            await asyncio.sleep(0.01)
            if self.token_response is not None:
                return httpx.Response(**self.token_response)
            self.grant_count += 1
            body = {
                "access_token": f"access-{self.grant_count}",
                "token_type": "bearer",
                "expires_in": self.expires_in,
                "scope": "*",
            }
            if self.refresh_token:
                body["refresh_token"] = self.refresh_token
            return httpx.Response(200, json=body)

        response = self.routes.get((request.url.host, request.url.path))
        if response is None:
            return httpx.Response(404, json={"message": "Not Found", "error": 404})
        return httpx.Response(**response)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def reddit():
    """A fresh FakeReddit."""
    return FakeReddit()


@pytest.fixture
def http_client(reddit):
    """An httpx.AsyncClient wired to the FakeReddit."""
    return httpx.AsyncClient(transport=httpx.MockTransport(reddit))


@pytest.fixture
def creds():
    return Credentials(CLIENT_ID, CLIENT_SECRET)


@pytest.fixture
def user_agent():
    return USER_AGENT


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep SNOOTS_* variables and .env files out of the tests."""
    import os

    for key in list(os.environ):
        if key.startswith("SNOOTS_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
