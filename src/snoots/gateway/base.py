"""The gateway to the Reddit API.

A gateway knows how to authenticate a request, which host to send it to, and
how to turn Reddit's response into either a value or an exception. There are
exactly two: `AnonGateway` for requests without a user token and
`OAuthGateway` for requests with one.
"""

from __future__ import annotations

import logging
import math
import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

import httpx
from pydantic import BaseModel

from ..errors import ApiError, TransportError

log = logging.getLogger(__name__)

Query = Mapping[str, Union[str, int, float, bool]]
Payload = Union[Mapping[str, Any], BaseModel]

# Reddit answers with this key wrapping `errors` and `data` when asked for api_type=json
RESULT_WRAPPER_KEY = "json"


@dataclass(frozen=True)
class RateLimit:
    """The rate limit state Reddit last reported."""

    remaining: int
    reset_at: float  # Unix timestamp
    used: int | None = None

    @property
    def resets_in(self) -> float:
        """Seconds until the rate limit window resets."""
        return max(0.0, self.reset_at - time.time())


@dataclass(frozen=True)
class BearerAuth:
    token: str


@dataclass(frozen=True)
class BasicAuth:
    user: str
    password: str = ""


GatewayAuth = Union[BearerAuth, BasicAuth]


def _parse_count(value: str) -> int:
    # Reddit sends counts as floats, e.g. "596.0"
    count = float(value)
    if not math.isfinite(count):
        raise ValueError(f"Not a finite count: {value!r}")
    return int(count)


class Gateway(ABC):
    """Base gateway.

    You shouldn't need this directly; use the `get`, `post` and `post_json`
    methods on `snoots.Client` instead.
    """

    def __init__(self, endpoint: str, user_agent: str, http_client: httpx.AsyncClient):
        self.endpoint = endpoint.rstrip("/")
        self.user_agent = user_agent
        self.rate_limit: RateLimit | None = None
        self._http = http_client

    @abstractmethod
    async def auth(self) -> GatewayAuth | None:
        """The credential to attach to the next request, if any."""

    @abstractmethod
    def map_path(self, path: str) -> str:
        """Map an API path to a full URL."""

    async def get(self, path: str, query: Query | None = None) -> Any:
        """Issue a GET request."""
        return await self._request("GET", path, query)

    async def post(self, path: str, data: Payload, query: Query | None = None) -> Any:
        """Issue a POST request with a form-encoded body."""
        return await self._request("POST", path, query, data=self._payload(data))

    async def post_json(self, path: str, data: Payload, query: Query | None = None) -> Any:
        """Issue a POST request with a JSON body."""
        return await self._request("POST", path, query, json=self._payload(data))

    @staticmethod
    def _payload(data: Payload) -> dict[str, Any]:
        if isinstance(data, BaseModel):
            data = data.model_dump(exclude_none=True)
        return {"api_type": "json", **data}

    async def build_options(self, query: Query | None) -> dict[str, Any]:
        """Build the keyword arguments for `httpx.AsyncClient.request`."""
        options: dict[str, Any] = {
            "headers": {"User-Agent": self.user_agent},
            "params": {**(query or {}), "raw_json": 1, "api_type": "json"},
        }

        auth = await self.auth()
        if isinstance(auth, BearerAuth):
            options["headers"]["Authorization"] = f"bearer {auth.token}"
        elif isinstance(auth, BasicAuth):
            options["auth"] = httpx.BasicAuth(auth.user, auth.password)

        return options

    async def _request(
        self,
        method: str,
        path: str,
        query: Query | None,
        **body: Any,
    ) -> Any:
        options = await self.build_options(query)
        try:
            response = await self._http.request(method, self.map_path(path), **options, **body)
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        self.record_rate_limit(response)
        return self._handle_response(response)

    def record_rate_limit(self, response: httpx.Response) -> httpx.Response:
        """Update the rate limit snapshot from the response headers.

        Headers that are missing or unparseable leave the snapshot unchanged.
        """
        headers = response.headers
        try:
            remaining = _parse_count(headers["x-ratelimit-remaining"])
            reset = float(headers["x-ratelimit-reset"])
        except (KeyError, ValueError):
            return response
        if not math.isfinite(reset):
            return response

        used: int | None
        try:
            used = _parse_count(headers["x-ratelimit-used"])
        except (KeyError, ValueError):
            used = None

        self.rate_limit = RateLimit(remaining=remaining, reset_at=time.time() + reset, used=used)
        log.debug("Rate limit: %s remaining, resets in %ss", remaining, reset)
        return response

    def _handle_response(self, response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError as e:
            if response.is_error:
                raise ApiError(f"HTTP {response.status_code}", status_code=response.status_code) from e
            raise TransportError(f"Malformed response body: {e}") from e

        if not response.is_error:
            return self.unwrap(body)

        try:
            self.unwrap(body)
        except ApiError as e:
            e.status_code = response.status_code
            raise
        raise ApiError(f"HTTP {response.status_code}", status_code=response.status_code)

    @staticmethod
    def unwrap(body: Any) -> Any:
        """Normalize a decoded response body.

        Reddit is inconsistent: some endpoints wrap their result as
        `{"json": {"errors": [...], "data": ...}}`, others return the value
        directly or a bare `{"error": ..., "error_description": ...}` object.

        Raises:
            ApiError: If the body reports an error
        """
        if not isinstance(body, dict):
            return body

        wrapped = body.get(RESULT_WRAPPER_KEY)
        if isinstance(wrapped, dict) and "errors" in wrapped:
            errors = wrapped["errors"]
            if errors:
                raise ApiError(errors[0])
            return wrapped.get("data")

        if "error" in body:
            raise ApiError(body["error"], body.get("error_description"))

        return body
