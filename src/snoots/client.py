"""snoots Client - the entry point to the Reddit API."""

from __future__ import annotations

from typing import Any

import httpx

from .auth.manager import TokenManager
from .config import SnootsSettings
from .controls import CommentControls, PostControls
from .errors import ConfigError
from .gateway import AnonGateway, Gateway, OAuthGateway, Payload, Query, RateLimit
from .oauth import client as oauth
from .oauth.models import Auth, Credentials, TokenAuth


class Client:
    """Reddit API client.

    Every Client is independent, so create as many as you need.

    Usage:
        # As a user
        client = Client(
            "<platform>:<app id>:<version> (by /u/<username>)",
            auth=UsernameAuth("<username>", "<password>"),
            creds=Credentials("<client id>", "<client secret>"),
        )

        # As a user, resuming from a refresh token
        client = Client(user_agent, auth=TokenAuth("<token>"), creds=creds)

        # As the app only
        client = Client(user_agent, creds=creds)

        # Fully unauthenticated (heavily rate limited)
        client = Client(user_agent)

        async with client:
            about = await client.get("api/v1/me")
            await client.posts.upvote("abc123")
    """

    def __init__(
        self,
        user_agent: str,
        auth: Auth | None = None,
        creds: Credentials | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        settings: SnootsSettings | None = None,
    ):
        if not user_agent or not user_agent.strip():
            raise ConfigError(
                "A unique, descriptive User-Agent is required. "
                "See https://github.com/reddit-archive/reddit/wiki/API#rules"
            )
        # Explicit arguments only; the environment is read by from_settings
        settings = settings or SnootsSettings.model_construct()

        self.user_agent = user_agent
        self.creds = creds

        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=settings.timeout)

        self._tokens = TokenManager(
            user_agent,
            creds,
            auth,
            http_client=self._http,
            margin=settings.token_expiry_margin,
            base_url=settings.reddit_url,
        )

        self._gateway: Gateway
        if creds is not None:
            self._gateway = OAuthGateway(user_agent, self._http, self._tokens, settings.oauth_url)
        else:
            self._gateway = AnonGateway(user_agent, self._http, endpoint=settings.reddit_url)

        # Controls need the client's internal state, so they come last
        self.comments = CommentControls(self)
        self.posts = PostControls(self)

    @classmethod
    def from_settings(cls, settings: SnootsSettings | None = None, **kwargs: Any) -> "Client":
        """Create a client from `SNOOTS_*` environment variables / .env.

        Raises:
            ConfigError: If no user agent is configured
        """
        settings = settings or SnootsSettings()
        return cls(
            settings.user_agent,
            auth=settings.auth,
            creds=settings.creds,
            settings=settings,
            **kwargs,
        )

    @staticmethod
    def make_auth_url(
        client_id: str,
        scopes: list[str],
        redirect_uri: str,
        state: str = "snoots",
        temporary: bool = False,
        base_url: str = oauth.REDDIT_URL,
    ) -> str:
        """Make an OAuth login URL. See `snoots.oauth.client.make_auth_url`."""
        return oauth.make_auth_url(client_id, scopes, redirect_uri, state, temporary, base_url)

    @classmethod
    async def from_auth_code(
        cls,
        code: str,
        redirect_uri: str,
        *,
        user_agent: str,
        creds: Credentials | None,
        http_client: httpx.AsyncClient | None = None,
        settings: SnootsSettings | None = None,
    ) -> "Client":
        """Create a client from the code of the interactive OAuth flow.

        Args:
            code: The code Reddit redirected back with
            redirect_uri: Must be the same URI given to `make_auth_url`
            user_agent: The app's User-Agent
            creds: The app credentials

        Raises:
            ConfigError: If no credentials are given
            AuthError: If Reddit rejects the code
        """
        if creds is None:
            raise ConfigError("No credentials given; exchanging an OAuth code requires them")

        client = cls(user_agent, creds=creds, http_client=http_client, settings=settings)
        try:
            token = await oauth.exchange_authorization_code(
                code,
                creds,
                user_agent,
                redirect_uri,
                http_client=client._http,
                base_url=client._tokens.base_url,
            )
        except Exception:
            await client.aclose()
            raise

        # Later grants resume from the refresh token, if Reddit issued one
        client._tokens.seed(token, TokenAuth(token.refresh) if token.refresh else None)
        return client

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the HTTP client, unless it was passed in."""
        if self._owns_http:
            await self._http.aclose()

    @property
    def rate_limit(self) -> RateLimit | None:
        """The rate limit state Reddit last reported, if any."""
        return self._gateway.rate_limit

    async def reauthorize(self, auth: Auth | None) -> None:
        """Switch to a different authorization.

        The current token is discarded; the next request performs a fresh
        grant exchange with `auth`.

        Raises:
            ConfigError: If the client has no credentials
        """
        if self.creds is None:
            raise ConfigError("No credentials configured; cannot authorize without a client id")
        await self._tokens.reauthorize(auth)

    def get_refresh_token(self) -> str | None:
        """The refresh token of the current session, if there is one.

        Store it and pass it back as `TokenAuth` to resume the session later.
        """
        return self._tokens.get_refresh_token()

    async def get(self, path: str, query: Query | None = None) -> Any:
        """Perform a GET request to the Reddit API.

        You shouldn't usually need this; the controls cover common endpoints.

        Raises:
            ApiError: If Reddit returns an error
        """
        return await self._gateway.get(path, query)

    async def post(self, path: str, data: Payload, query: Query | None = None) -> Any:
        """Perform a form-encoded POST request to the Reddit API."""
        return await self._gateway.post(path, data, query)

    async def post_json(self, path: str, data: Payload, query: Query | None = None) -> Any:
        """Perform a JSON POST request to the Reddit API."""
        return await self._gateway.post_json(path, data, query)
