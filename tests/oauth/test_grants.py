"""Tests for the OAuth grant exchanges."""

import base64
import time
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from snoots.errors import AuthError, ConfigError, TransportError
from snoots.oauth.client import (
    AUTHORIZE_URL,
    TOKEN_URL,
    exchange_authorization_code,
    make_auth_url,
    obtain_or_refresh,
)
from snoots.oauth.models import AppOnlyAuth, Credentials, Token, TokenAuth, UsernameAuth


class TestMakeAuthUrl:
    """Tests for make_auth_url."""

    def test_required_parameters(self):
        """Should include every required query parameter."""
        url = make_auth_url("cid", ["identity", "read"], "https://cb")

        assert url.startswith(AUTHORIZE_URL + "?")
        assert "client_id=cid" in url
        assert "response_type=code" in url
        assert "state=snoots" in url
        assert "duration=permanent" in url
        assert "scope=identity+read" in url

    def test_redirect_uri_round_trips(self):
        """Should encode the redirect URI so it parses back unchanged."""
        url = make_auth_url("cid", ["identity"], "https://example.com/cb?x=1")

        query = parse_qs(urlparse(url).query)
        assert query["redirect_uri"] == ["https://example.com/cb?x=1"]
        assert query["scope"] == ["identity"]

    def test_temporary_and_custom_state(self):
        """Should honor temporary duration and a custom state."""
        url = make_auth_url("cid", ["read"], "https://cb", state="csrf123", temporary=True)

        query = parse_qs(urlparse(url).query)
        assert query["duration"] == ["temporary"]
        assert query["state"] == ["csrf123"]

    def test_custom_host(self):
        """Should point at the configured web host."""
        url = make_auth_url("cid", ["read"], "https://cb", base_url="http://localhost:9000/")

        assert url.startswith("http://localhost:9000/api/v1/authorize?")


class TestObtainOrRefresh:
    """Tests for obtain_or_refresh grant selection."""

    @pytest.mark.asyncio
    async def test_fresh_token_returned_without_network(self, reddit, http_client, creds, user_agent):
        """Should return a fresh token unchanged and make no request."""
        token = Token(access="still-good", expires_at=time.time() + 3600)

        result = await obtain_or_refresh(
            user_agent, token, creds, AppOnlyAuth(), http_client=http_client
        )

        assert result is token
        assert reddit.requests == []

    @pytest.mark.asyncio
    async def test_password_grant(self, reddit, http_client, creds, user_agent):
        """Should use the password grant for UsernameAuth."""
        token = await obtain_or_refresh(
            user_agent, None, creds, UsernameAuth("spez", "hunter2"), http_client=http_client
        )

        assert token.access == "access-1"
        assert reddit.grants == [
            {"grant_type": "password", "username": "spez", "password": "hunter2"}
        ]

    @pytest.mark.asyncio
    async def test_refresh_token_grant(self, reddit, http_client, creds, user_agent):
        """Should use the refresh_token grant for TokenAuth."""
        token = await obtain_or_refresh(
            user_agent, None, creds, TokenAuth("refresh-abc"), http_client=http_client
        )

        assert reddit.grants == [{"grant_type": "refresh_token", "refresh_token": "refresh-abc"}]
        # Reddit did not send a new refresh token, so the submitted one is kept
        assert token.refresh == "refresh-abc"

    @pytest.mark.asyncio
    async def test_refresh_token_rotation(self, reddit, http_client, creds, user_agent):
        """Should prefer a refresh token returned by Reddit."""
        reddit.refresh_token = "refresh-new"

        token = await obtain_or_refresh(
            user_agent, None, creds, TokenAuth("refresh-old"), http_client=http_client
        )

        assert token.refresh == "refresh-new"

    @pytest.mark.asyncio
    async def test_client_credentials_grant(self, reddit, http_client, creds, user_agent):
        """Should use the client_credentials grant for app-only auth."""
        token = await obtain_or_refresh(
            user_agent, None, creds, AppOnlyAuth(), http_client=http_client
        )

        assert reddit.grants == [{"grant_type": "client_credentials"}]
        assert token.refresh is None

    @pytest.mark.asyncio
    async def test_expired_token_triggers_grant(self, reddit, http_client, creds, user_agent):
        """Should exchange again once the token is inside the expiry margin."""
        stale = Token(access="stale", expires_at=time.time() + 30)

        token = await obtain_or_refresh(
            user_agent, stale, creds, AppOnlyAuth(), http_client=http_client, margin=60
        )

        assert token.access == "access-1"
        assert len(reddit.grants) == 1

    @pytest.mark.asyncio
    async def test_expiry_is_issue_time_plus_lifetime(self, reddit, http_client, creds, user_agent):
        """Should stamp expires_at as now + expires_in."""
        reddit.expires_in = 1800
        before = time.time()

        token = await obtain_or_refresh(
            user_agent, None, creds, AppOnlyAuth(), http_client=http_client
        )

        assert before + 1800 <= token.expires_at <= time.time() + 1800

    @pytest.mark.asyncio
    async def test_token_request_shape(self, reddit, http_client, creds, user_agent):
        """Should POST to the token endpoint with basic auth and the user agent."""
        await obtain_or_refresh(user_agent, None, creds, AppOnlyAuth(), http_client=http_client)

        request = reddit.token_requests[0]
        assert request.method == "POST"
        assert str(request.url) == TOKEN_URL
        assert request.headers["User-Agent"] == user_agent
        expected = base64.b64encode(f"{creds.client_id}:{creds.client_secret}".encode()).decode()
        assert request.headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.asyncio
    async def test_token_request_custom_host(self, reddit, http_client, creds, user_agent):
        """Should send credentials to the configured host only."""
        await obtain_or_refresh(
            user_agent,
            None,
            creds,
            UsernameAuth("spez", "hunter2"),
            http_client=http_client,
            base_url="http://localhost:9000",
        )

        assert str(reddit.token_requests[0].url) == "http://localhost:9000/api/v1/access_token"

    @pytest.mark.asyncio
    async def test_no_credentials(self, reddit, http_client, user_agent):
        """Should raise ConfigError, which is also an AuthError, without credentials."""
        with pytest.raises(ConfigError) as exc_info:
            await obtain_or_refresh(user_agent, None, None, AppOnlyAuth(), http_client=http_client)

        assert isinstance(exc_info.value, AuthError)
        assert reddit.requests == []

    @pytest.mark.asyncio
    async def test_rejected_password(self, reddit, http_client, creds, user_agent):
        """Should raise AuthError when Reddit answers 200 with an error body."""
        reddit.reject_grants({"error": "invalid_grant"})

        with pytest.raises(AuthError) as exc_info:
            await obtain_or_refresh(
                user_agent, None, creds, UsernameAuth("spez", "wrong"), http_client=http_client
            )

        assert exc_info.value.error_code == "invalid_grant"
        assert "password" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_rejected_client(self, reddit, http_client, creds, user_agent):
        """Should raise AuthError with the status code on a 401."""
        reddit.reject_grants({"message": "Unauthorized", "error": 401}, status_code=401)

        with pytest.raises(AuthError) as exc_info:
            await obtain_or_refresh(user_agent, None, creds, AppOnlyAuth(), http_client=http_client)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token_response(self, reddit, http_client, creds, user_agent):
        """Should raise AuthError when the body has no access token."""
        reddit.reject_grants({"token_type": "bearer", "expires_in": 3600})

        with pytest.raises(AuthError) as exc_info:
            await obtain_or_refresh(user_agent, None, creds, AppOnlyAuth(), http_client=http_client)

        assert "Invalid token response" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_failure(self, creds, user_agent):
        """Should raise TransportError when the endpoint is unreachable."""

        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(fail))

        with pytest.raises(TransportError):
            await obtain_or_refresh(user_agent, None, creds, AppOnlyAuth(), http_client=client)

    @pytest.mark.asyncio
    async def test_installed_app_has_empty_secret(self, reddit, http_client, user_agent):
        """Should send an empty password for apps without a secret."""
        await obtain_or_refresh(
            user_agent, None, Credentials("installed"), AppOnlyAuth(), http_client=http_client
        )

        expected = base64.b64encode(b"installed:").decode()
        assert reddit.token_requests[0].headers["Authorization"] == f"Basic {expected}"


class TestExchangeAuthorizationCode:
    """Tests for exchange_authorization_code."""

    @pytest.mark.asyncio
    async def test_exchange_code(self, reddit, http_client, creds, user_agent):
        """Should use the authorization_code grant with the redirect URI."""
        reddit.refresh_token = "refresh-from-code"

        token = await exchange_authorization_code(
            "code-123", creds, user_agent, "https://cb", http_client=http_client
        )

        assert reddit.grants == [
            {"grant_type": "authorization_code", "code": "code-123", "redirect_uri": "https://cb"}
        ]
        assert token.access == "access-1"
        assert token.refresh == "refresh-from-code"

    @pytest.mark.asyncio
    async def test_exchange_code_custom_host(self, reddit, http_client, creds, user_agent):
        await exchange_authorization_code(
            "code-123",
            creds,
            user_agent,
            "https://cb",
            http_client=http_client,
            base_url="http://localhost:9000/",
        )

        assert reddit.token_requests[0].url.host == "localhost"
        assert reddit.token_requests[0].url.path == "/api/v1/access_token"

    @pytest.mark.asyncio
    async def test_exchange_code_rejected(self, reddit, http_client, creds, user_agent):
        """Should raise AuthError for an expired or reused code."""
        reddit.reject_grants({"error": "invalid_grant"})

        with pytest.raises(AuthError) as exc_info:
            await exchange_authorization_code(
                "used-code", creds, user_agent, "https://cb", http_client=http_client
            )

        assert "authorization_code" in str(exc_info.value)
