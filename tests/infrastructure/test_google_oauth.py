"""
Unit tests for the Google OAuth client.
"""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest
from respx import MockRouter

from oauth_bridge.core.exceptions import (
    MissingRefreshTokenError,
    NoAccessTokenError,
    TokenExchangeError,
)
from oauth_bridge.infrastructure.google_oauth import GOOGLE_TOKEN_URL, GoogleOAuthClient


CALLBACK_URL = "https://bridge.example/api/auth/youtube"


@pytest.fixture
def oauth_client():
    return GoogleOAuthClient(client_id="client-id", client_secret="client-secret")


def test_create_authorization_url(oauth_client):
    """Test the consent URL carries every required parameter."""
    url = oauth_client.create_authorization_url(
        CALLBACK_URL, "scope-a scope-b", "encoded-state"
    )

    parsed = urlparse(url)
    params = parse_qs(parsed.query)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == (
        "https://accounts.google.com/o/oauth2/v2/auth"
    )
    assert params["client_id"] == ["client-id"]
    assert params["redirect_uri"] == [CALLBACK_URL]
    assert params["response_type"] == ["code"]
    assert params["scope"] == ["scope-a scope-b"]
    assert params["state"] == ["encoded-state"]
    assert params["access_type"] == ["offline"]
    assert params["prompt"] == ["consent"]


@pytest.mark.asyncio
async def test_exchange_code_success(oauth_client, respx_mock: MockRouter):
    """Test a successful exchange returns a TokenGrant."""
    route = respx_mock.post(GOOGLE_TOKEN_URL).mock(
        return_value=httpx.Response(
            200,
            json={
                "access_token": "access",
                "refresh_token": "refresh",
                "expires_in": 3599,
                "scope": "scope-a",
                "token_type": "Bearer",
            },
        )
    )

    grant = await oauth_client.exchange_code("abc123", CALLBACK_URL)

    assert grant.access_token == "access"
    assert grant.refresh_token == "refresh"
    assert grant.expires_in == 3599
    assert grant.scope == "scope-a"

    body = parse_qs(route.calls.last.request.content.decode())
    assert body["grant_type"] == ["authorization_code"]
    assert body["code"] == ["abc123"]
    assert body["redirect_uri"] == [CALLBACK_URL]
    assert "client-id" in body["client_id"]
    assert "client-secret" in body["client_secret"]


@pytest.mark.asyncio
async def test_exchange_code_missing_refresh_token(
    oauth_client, respx_mock: MockRouter
):
    """Test a grant without refresh token is classified separately."""
    respx_mock.post(GOOGLE_TOKEN_URL).mock(
        return_value=httpx.Response(
            200, json={"access_token": "access", "expires_in": 3599}
        )
    )

    with pytest.raises(MissingRefreshTokenError):
        await oauth_client.exchange_code("abc123", CALLBACK_URL)


@pytest.mark.asyncio
async def test_exchange_code_rejected(oauth_client, respx_mock: MockRouter):
    """Test an OAuth error response raises TokenExchangeError."""
    respx_mock.post(GOOGLE_TOKEN_URL).mock(
        return_value=httpx.Response(
            400,
            json={"error": "invalid_grant", "error_description": "Bad Request"},
        )
    )

    with pytest.raises(TokenExchangeError):
        await oauth_client.exchange_code("abc123", CALLBACK_URL)


@pytest.mark.asyncio
async def test_exchange_code_non_json_error(oauth_client, respx_mock: MockRouter):
    """Test a non-JSON server error raises TokenExchangeError."""
    respx_mock.post(GOOGLE_TOKEN_URL).mock(
        return_value=httpx.Response(500, text="Internal Server Error")
    )

    with pytest.raises(TokenExchangeError):
        await oauth_client.exchange_code("abc123", CALLBACK_URL)


@pytest.mark.asyncio
async def test_exchange_code_without_access_token(
    oauth_client, respx_mock: MockRouter
):
    """Test a 2xx response lacking access_token gets its own error code."""
    respx_mock.post(GOOGLE_TOKEN_URL).mock(
        return_value=httpx.Response(200, json={"refresh_token": "refresh"})
    )

    with pytest.raises(NoAccessTokenError) as exc_info:
        await oauth_client.exchange_code("abc123", CALLBACK_URL)

    assert exc_info.value.error_code == "no_access_token"


@pytest.mark.asyncio
async def test_exchange_code_network_error(oauth_client, respx_mock: MockRouter):
    """Test a transport failure raises TokenExchangeError."""
    respx_mock.post(GOOGLE_TOKEN_URL).mock(
        side_effect=httpx.ConnectError("Connection failed")
    )

    with pytest.raises(TokenExchangeError):
        await oauth_client.exchange_code("abc123", CALLBACK_URL)


@pytest.mark.asyncio
async def test_exchange_code_without_credentials():
    """Test exchange fails without calling Google when unconfigured."""
    client = GoogleOAuthClient(client_id=None, client_secret=None)

    with pytest.raises(TokenExchangeError, match="not configured"):
        await client.exchange_code("abc123", CALLBACK_URL)
