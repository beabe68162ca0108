"""Gateway for requests made without a user token."""

from __future__ import annotations

import httpx

from ..oauth.client import REDDIT_URL
from ..oauth.models import AppOnlyAuth, Auth, Credentials
from .base import BasicAuth, Gateway


class AnonGateway(Gateway):
    """Talks to the public www.reddit.com host.

    Without credentials requests are fully unauthenticated. With credentials
    and no user auth, requests carry the app's client id as basic auth.
    """

    def __init__(
        self,
        user_agent: str,
        http_client: httpx.AsyncClient,
        creds: Credentials | None = None,
        auth: Auth | None = None,
        endpoint: str = REDDIT_URL,
    ):
        super().__init__(endpoint, user_agent, http_client)
        self.creds = creds
        self.user_auth: Auth = auth or AppOnlyAuth()

    async def auth(self) -> BasicAuth | None:
        if self.creds is None:
            return None
        if isinstance(self.user_auth, AppOnlyAuth):
            return BasicAuth(self.creds.client_id, "")
        return None

    def map_path(self, path: str) -> str:
        path = path.strip("/")
        if not path.endswith(".json"):
            path += ".json"
        return f"{self.endpoint}/{path}"
