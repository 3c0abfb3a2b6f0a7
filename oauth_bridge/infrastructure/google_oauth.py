"""
Google OAuth2 client.

Builds the consent screen URL and exchanges authorization codes for
tokens using authlib's httpx-based OAuth2 client. The code is single-use,
so a failed exchange is never retried.
"""

import logging

import httpx
from authlib.integrations.httpx_client import AsyncOAuth2Client, OAuthError
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri
from pydantic import BaseModel, ConfigDict, ValidationError

from oauth_bridge.core.domain import TokenGrant
from oauth_bridge.core.exceptions import (
    MissingRefreshTokenError,
    NoAccessTokenError,
    TokenExchangeError,
)

logger = logging.getLogger(__name__)


GOOGLE_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


class TokenResponse(BaseModel):
    """Token endpoint response, validated once at the boundary."""

    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None
    scope: str | None = None
    token_type: str = "Bearer"

    model_config = ConfigDict(extra="allow")


class GoogleOAuthClient:
    """Authorization server adapter for Google accounts."""

    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        timeout: float = 10.0,
        authorize_url: str = GOOGLE_AUTHORIZE_URL,
        token_url: str = GOOGLE_TOKEN_URL,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = timeout
        self._authorize_url = authorize_url
        self._token_url = token_url

    def _create_client(self, callback_url: str) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self._client_id,
            client_secret=self._client_secret,
            redirect_uri=callback_url,
            token_endpoint_auth_method="client_secret_post",
            timeout=self._timeout,
        )

    def create_authorization_url(
        self, callback_url: str, scope: str, state: str
    ) -> str:
        """
        Build the Google consent screen URL.

        ``access_type=offline`` and ``prompt=consent`` force Google to issue
        a refresh token even for users who consented before.

        Args:
            callback_url: This bridge's own callback URL
            scope: Space-delimited scopes
            state: Encoded authorization state

        Returns:
            Authorization URL
        """
        return prepare_grant_uri(
            self._authorize_url,
            client_id=self._client_id,
            response_type="code",
            redirect_uri=callback_url,
            scope=scope,
            state=state,
            access_type="offline",
            prompt="consent",
        )

    async def exchange_code(self, code: str, callback_url: str) -> TokenGrant:
        """
        Exchange an authorization code for tokens.

        Args:
            code: Authorization code from the callback
            callback_url: Must equal the redirect_uri used for the consent URL

        Returns:
            TokenGrant

        Raises:
            TokenExchangeError: Provider rejected the code or credentials
            NoAccessTokenError: Exchange succeeded without an access token
            MissingRefreshTokenError: Exchange succeeded without a refresh token
        """
        if not self._client_id or not self._client_secret:
            raise TokenExchangeError("OAuth client credentials are not configured")

        try:
            async with self._create_client(callback_url) as client:
                token = await client.fetch_token(
                    self._token_url,
                    grant_type="authorization_code",
                    code=code,
                    redirect_uri=callback_url,
                )
        except OAuthError as e:
            logger.error(
                f"Token exchange rejected: {e.error}",
                extra={"oauth_error": e.error, "oauth_error_description": e.description},
            )
            raise TokenExchangeError(f"Token exchange rejected: {e.error}") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Token endpoint returned {e.response.status_code}")
            raise TokenExchangeError(
                f"Token endpoint returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Network error during token exchange: {e}")
            raise TokenExchangeError(f"Network error: {e}") from e
        except ValueError as e:
            # Non-JSON body from the token endpoint
            logger.error(f"Unreadable token response: {e}")
            raise TokenExchangeError(f"Unreadable token response: {e}") from e

        if not token.get("access_token"):
            logger.error("Token response has no access token")
            raise NoAccessTokenError()

        try:
            response = TokenResponse.model_validate(dict(token))
        except ValidationError as e:
            logger.error("Token response failed validation")
            raise TokenExchangeError(f"Invalid token response: {e}") from e

        if not response.refresh_token:
            logger.warning("Token exchange returned no refresh token")
            raise MissingRefreshTokenError()

        return TokenGrant(
            access_token=response.access_token,
            refresh_token=response.refresh_token,
            expires_in=response.expires_in,
            scope=response.scope,
            token_type=response.token_type,
        )
