"""snoots configuration via pydantic-settings."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from .oauth.client import EXPIRY_MARGIN, OAUTH_URL, REDDIT_URL
from .oauth.models import AppOnlyAuth, Auth, Credentials, TokenAuth, UsernameAuth


class SnootsSettings(BaseSettings):
    user_agent: str = ""
    client_id: str | None = None
    client_secret: str = ""
    username: str | None = None
    password: str | None = None
    refresh_token: str | None = None

    # Interactive OAuth flow
    redirect_uri: str = "http://localhost:8080/callback"
    scopes: str = "identity,read"

    timeout: float = 30.0
    token_expiry_margin: float = EXPIRY_MARGIN
    reddit_url: str = REDDIT_URL
    oauth_url: str = OAUTH_URL

    model_config = {"env_prefix": "SNOOTS_", "env_file": ".env", "extra": "ignore"}

    @property
    def creds(self) -> Credentials | None:
        if not self.client_id:
            return None
        return Credentials(self.client_id, self.client_secret)

    @property
    def auth(self) -> Auth:
        """Username/password wins over a refresh token; neither means app-only."""
        if self.username and self.password:
            return UsernameAuth(self.username, self.password)
        if self.refresh_token:
            return TokenAuth(self.refresh_token)
        return AppOnlyAuth()

    @property
    def scope_list(self) -> list[str]:
        return [s.strip() for s in self.scopes.split(",") if s.strip()]
