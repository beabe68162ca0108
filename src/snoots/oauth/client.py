"""OAuth 2.0 grant exchanges against Reddit.

Reddit supports four grants that matter to snoots:

1. password: a script app logging in as its owner
2. refresh_token: resuming a session from a stored refresh token
3. client_credentials: app-only access, no user involved
4. authorization_code: bootstrapping a session from the interactive flow

Every function here is stateless: it takes the current values and returns a
new Token, leaving storage to the caller.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from ..errors import AuthError, ConfigError, TransportError
from .models import AppOnlyAuth, Auth, Credentials, Token, TokenAuth, TokenResponse, UsernameAuth

log = logging.getLogger(__name__)

# Reddit endpoints
REDDIT_URL = "https://www.reddit.com"
OAUTH_URL = "https://oauth.reddit.com"
TOKEN_PATH = "/api/v1/access_token"
AUTHORIZE_PATH = "/api/v1/authorize"
TOKEN_URL = REDDIT_URL + TOKEN_PATH
AUTHORIZE_URL = REDDIT_URL + AUTHORIZE_PATH

# Treat tokens as expired this many seconds early
EXPIRY_MARGIN = 60


def make_auth_url(
    client_id: str,
    scopes: list[str],
    redirect_uri: str,
    state: str = "snoots",
    temporary: bool = False,
    base_url: str = REDDIT_URL,
) -> str:
    """Make the URL a user visits to authorize the app.

    Args:
        client_id: The ID of the Reddit app
        scopes: The scopes to request
        redirect_uri: Where Reddit sends the user (with ?code=...) afterwards
        state: Opaque value echoed back on redirect, used as a CSRF token
        temporary: Request a one hour grant instead of a permanent one
        base_url: The Reddit web host serving the authorize page

    Returns:
        URL to send the user to
    """
    params = {
        "client_id": client_id,
        "response_type": "code",
        "state": state,
        "redirect_uri": redirect_uri,
        "duration": "temporary" if temporary else "permanent",
        "scope": " ".join(scopes),
    }
    return f"{base_url.rstrip('/')}{AUTHORIZE_PATH}?{urlencode(params)}"


async def obtain_or_refresh(
    user_agent: str,
    token: Token | None,
    creds: Credentials | None,
    auth: Auth,
    *,
    http_client: httpx.AsyncClient | None = None,
    margin: float = EXPIRY_MARGIN,
    base_url: str = REDDIT_URL,
) -> Token:
    """Return a usable token, performing a grant exchange only when needed.

    Args:
        user_agent: The app's User-Agent
        token: The current token, if any
        creds: The app credentials
        auth: How to authenticate the user
        http_client: Client to send the grant request with
        margin: Seconds before expiry at which a token counts as stale
        base_url: The Reddit web host serving the token endpoint

    Returns:
        `token` itself if it is still fresh, otherwise a new Token

    Raises:
        ConfigError: If no credentials are configured
        AuthError: If Reddit rejects the grant
        TransportError: If the token endpoint could not be reached
    """
    if token is not None and not token.is_expired(margin):
        return token

    if creds is None:
        raise ConfigError("No credentials configured; an OAuth grant needs a client id")

    if isinstance(auth, UsernameAuth):
        data = {"grant_type": "password", "username": auth.username, "password": auth.password}
        return await _request_token(data, creds, user_agent, http_client, base_url)
    elif isinstance(auth, TokenAuth):
        data = {"grant_type": "refresh_token", "refresh_token": auth.refresh_token}
        return await _request_token(
            data, creds, user_agent, http_client, base_url, fallback_refresh=auth.refresh_token
        )
    elif isinstance(auth, AppOnlyAuth):
        data = {"grant_type": "client_credentials"}
        return await _request_token(data, creds, user_agent, http_client, base_url)
    raise TypeError(f"Unsupported auth type: {type(auth).__name__}")


async def exchange_authorization_code(
    code: str,
    creds: Credentials,
    user_agent: str,
    redirect_uri: str,
    *,
    http_client: httpx.AsyncClient | None = None,
    base_url: str = REDDIT_URL,
) -> Token:
    """Exchange a code from the authorization redirect for a token.

    Args:
        code: The `code` query parameter Reddit redirected with
        creds: The app credentials
        user_agent: The app's User-Agent
        redirect_uri: Must be identical to the one passed to `make_auth_url`
        http_client: Client to send the grant request with
        base_url: The Reddit web host serving the token endpoint

    Raises:
        AuthError: If the code is expired, reused, or the redirect URI differs
    """
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": redirect_uri,
    }
    return await _request_token(data, creds, user_agent, http_client, base_url)


async def _request_token(
    data: dict[str, str],
    creds: Credentials,
    user_agent: str,
    http_client: httpx.AsyncClient | None,
    base_url: str = REDDIT_URL,
    fallback_refresh: str | None = None,
) -> Token:
    grant_type = data["grant_type"]
    url = base_url.rstrip("/") + TOKEN_PATH
    log.debug("Requesting %s grant for client %s", grant_type, creds.client_id)

    if http_client is None:
        async with httpx.AsyncClient(timeout=30.0) as client:
            response = await _post_token(client, url, data, creds, user_agent)
    else:
        response = await _post_token(http_client, url, data, creds, user_agent)

    try:
        body: Any = response.json()
    except ValueError as e:
        if response.status_code >= 400:
            raise AuthError(
                f"Token request failed: {response.status_code}",
                status_code=response.status_code,
            ) from e
        raise TransportError(f"Token endpoint returned a non-JSON body: {e}") from e

    if response.status_code >= 400 or (isinstance(body, dict) and "error" in body):
        error_code = body.get("error") if isinstance(body, dict) else None
        message = f"{grant_type} grant rejected: {error_code or response.status_code}"
        raise AuthError(
            message,
            status_code=response.status_code,
            error_code=str(error_code) if error_code is not None else None,
        )

    try:
        parsed = TokenResponse.model_validate(body)
    except ValidationError as e:
        raise AuthError(f"Invalid token response: {e.error_count()} validation error(s)") from e

    token = parsed.to_token(fallback_refresh=fallback_refresh)
    log.debug("Obtained %s token, expires in %ss", grant_type, parsed.expires_in)
    return token


async def _post_token(
    client: httpx.AsyncClient,
    url: str,
    data: dict[str, str],
    creds: Credentials,
    user_agent: str,
) -> httpx.Response:
    try:
        return await client.post(
            url,
            data=data,
            auth=httpx.BasicAuth(creds.client_id, creds.client_secret),
            headers={"User-Agent": user_agent},
        )
    except httpx.HTTPError as e:
        raise TransportError(f"Token request failed: {e}") from e
