"""
Port definitions (interfaces) for the core domain.

Ports define the contracts between the bridge and the external systems it
talks to. Infrastructure adapters implement these ports; the token store
port lives with the channel credential model in oauth_bridge.channels.
"""

from typing import Protocol

from oauth_bridge.core.domain import Channel, TokenGrant


class AuthorizationServer(Protocol):
    """
    Port for the OAuth2 identity provider.

    Implemented by GoogleOAuthClient. Failures are raised as
    TokenExchangeError or MissingRefreshTokenError.
    """

    def create_authorization_url(
        self, callback_url: str, scope: str, state: str
    ) -> str:
        """Build the consent screen URL the user is redirected to."""
        ...

    async def exchange_code(self, code: str, callback_url: str) -> TokenGrant:
        """
        Exchange a single-use authorization code for tokens.

        Args:
            code: Authorization code from the callback
            callback_url: This bridge's own callback URL (must match the one
                used to build the authorization URL)

        Returns:
            TokenGrant including a refresh token
        """
        ...


class ChannelFetcher(Protocol):
    """Port for reading the authenticated user's channel."""

    async def fetch_primary_channel(self, access_token: str) -> Channel:
        """
        Fetch the channel owned by the token's user.

        Raises:
            ChannelFetchError: On transport, auth or parse failure
            NoChannelError: If the account has no channel
        """
        ...
