"""Credential, auth and token types used by the OAuth layer."""

from __future__ import annotations

import time
from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class Credentials:
    """The identity of a Reddit app (from https://www.reddit.com/prefs/apps).

    Installed apps have no secret, so it defaults to an empty string.
    """

    client_id: str
    client_secret: str = ""


@dataclass(frozen=True)
class UsernameAuth:
    """Log in as a user with their username and password."""

    username: str
    password: str

    def __repr__(self) -> str:
        return f"UsernameAuth(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class TokenAuth:
    """Resume a user session from an OAuth refresh token."""

    refresh_token: str

    def __repr__(self) -> str:
        return "TokenAuth(refresh_token='***')"


@dataclass(frozen=True)
class AppOnlyAuth:
    """Authenticate as the app itself, with no user behind the requests."""


Auth = UsernameAuth | TokenAuth | AppOnlyAuth


@dataclass(frozen=True)
class Token:
    """A live access token.

    Tokens are never updated in place; a refresh produces a new Token.
    """

    access: str
    expires_at: float  # Unix timestamp
    refresh: str | None = None
    scope: str = ""

    def __post_init__(self) -> None:
        if not self.access:
            raise ValueError("Token access value must not be empty")

    def is_expired(self, margin: float = 0) -> bool:
        """Whether the token is expired, or will be within `margin` seconds."""
        return time.time() >= self.expires_at - margin

    @property
    def expires_in_seconds(self) -> int:
        """Seconds until the token expires."""
        return max(0, int(self.expires_at - time.time()))

    def __repr__(self) -> str:
        return f"Token(access='***', expires_at={self.expires_at!r}, scope={self.scope!r})"


class TokenResponse(BaseModel):
    """Body of a successful response from the access token endpoint."""

    access_token: str = Field(min_length=1)
    expires_in: int = 3600
    token_type: str = "bearer"
    refresh_token: str | None = None
    scope: str = ""

    def to_token(self, fallback_refresh: str | None = None) -> Token:
        """Convert to a Token, stamping the expiry from the current time."""
        return Token(
            access=self.access_token,
            expires_at=time.time() + self.expires_in,
            refresh=self.refresh_token or fallback_refresh,
            scope=self.scope,
        )
