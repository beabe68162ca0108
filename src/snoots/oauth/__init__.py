"""OAuth grant exchanges and token types.

Usage:
    from snoots.oauth import Credentials, UsernameAuth, obtain_or_refresh

    creds = Credentials("<client id>", "<client secret>")
    token = await obtain_or_refresh(user_agent, None, creds, UsernameAuth("me", "pw"))

    # Later, only exchanges again once the token is (nearly) expired
    token = await obtain_or_refresh(user_agent, token, creds, UsernameAuth("me", "pw"))
"""

from .client import (
    AUTHORIZE_URL,
    EXPIRY_MARGIN,
    OAUTH_URL,
    REDDIT_URL,
    TOKEN_URL,
    exchange_authorization_code,
    make_auth_url,
    obtain_or_refresh,
)
from .models import AppOnlyAuth, Auth, Credentials, Token, TokenAuth, TokenResponse, UsernameAuth

__all__ = [
    "AUTHORIZE_URL",
    "EXPIRY_MARGIN",
    "OAUTH_URL",
    "REDDIT_URL",
    "TOKEN_URL",
    "AppOnlyAuth",
    "Auth",
    "Credentials",
    "Token",
    "TokenAuth",
    "TokenResponse",
    "UsernameAuth",
    "exchange_authorization_code",
    "make_auth_url",
    "obtain_or_refresh",
]
