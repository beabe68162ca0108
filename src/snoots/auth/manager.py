"""Token cache for a single Client.

Holds the live token and refreshes it through the stateless grant functions
in `snoots.oauth.client`, making sure concurrent callers share one exchange.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from ..errors import SnootsError
from ..oauth.client import EXPIRY_MARGIN, REDDIT_URL, obtain_or_refresh
from ..oauth.models import AppOnlyAuth, Auth, Credentials, Token, TokenAuth

log = logging.getLogger(__name__)


class TokenManager:
    """Single-flight token cache.

    Usage:
        manager = TokenManager(user_agent, creds, UsernameAuth("me", "hunter2"))

        # Performs a password grant the first time, then reuses the token
        token = await manager.get_token()

        # Switch users; the next get_token() performs a fresh grant
        await manager.reauthorize(TokenAuth(refresh_token))
    """

    def __init__(
        self,
        user_agent: str,
        creds: Credentials | None,
        auth: Auth | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        margin: float = EXPIRY_MARGIN,
        base_url: str = REDDIT_URL,
    ):
        self.user_agent = user_agent
        self.creds = creds
        self.margin = margin
        self.base_url = base_url
        self._auth: Auth = auth or AppOnlyAuth()
        self._http_client = http_client
        self._token: Token | None = None
        self._lock = asyncio.Lock()

    @property
    def auth(self) -> Auth:
        return self._auth

    @property
    def token(self) -> Token | None:
        return self._token

    def _is_fresh(self) -> bool:
        return self._token is not None and not self._token.is_expired(self.margin)

    async def get_token(self) -> Token:
        """Get a live token, performing a grant exchange if needed.

        Concurrent callers that find the token stale wait for the first
        caller's exchange instead of starting their own.

        Raises:
            ConfigError: If no credentials are configured
            AuthError: If Reddit rejects the grant
            TransportError: If the token endpoint could not be reached
        """
        if self._is_fresh():
            return self._token  # type: ignore[return-value]

        async with self._lock:
            # Another caller may have refreshed while we waited
            if self._is_fresh():
                return self._token  # type: ignore[return-value]

            try:
                token = await obtain_or_refresh(
                    self.user_agent,
                    self._token,
                    self.creds,
                    self._auth,
                    http_client=self._http_client,
                    margin=self.margin,
                    base_url=self.base_url,
                )
            except SnootsError:
                self._token = None
                raise

            # Reddit may rotate refresh tokens; keep resuming from the newest one
            if (
                isinstance(self._auth, TokenAuth)
                and token.refresh
                and token.refresh != self._auth.refresh_token
            ):
                log.debug("Refresh token rotated")
                self._auth = TokenAuth(token.refresh)

            self._token = token
            return token

    async def reauthorize(self, auth: Auth | None) -> None:
        """Replace the auth descriptor and drop the current token."""
        async with self._lock:
            self._auth = auth or AppOnlyAuth()
            self._token = None

    def seed(self, token: Token, auth: Auth | None = None) -> None:
        """Install a token obtained elsewhere, e.g. from a code exchange."""
        self._token = token
        if auth is not None:
            self._auth = auth

    def get_refresh_token(self) -> str | None:
        """The refresh value of the live token, if it has one."""
        return self._token.refresh if self._token else None
