"""Gateway for requests made with an OAuth access token."""

from __future__ import annotations

import httpx

from ..auth.manager import TokenManager
from ..oauth.client import OAUTH_URL
from .base import BearerAuth, Gateway


class OAuthGateway(Gateway):
    """Talks to the oauth.reddit.com host with a bearer token.

    The token comes from the shared `TokenManager`, which performs a grant
    exchange when there is no live token.
    """

    def __init__(
        self,
        user_agent: str,
        http_client: httpx.AsyncClient,
        tokens: TokenManager,
        endpoint: str = OAUTH_URL,
    ):
        super().__init__(endpoint, user_agent, http_client)
        self.tokens = tokens

    async def auth(self) -> BearerAuth:
        token = await self.tokens.get_token()
        return BearerAuth(token.access)

    def map_path(self, path: str) -> str:
        return f"{self.endpoint}/{path.lstrip('/')}"
