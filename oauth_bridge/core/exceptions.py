"""
Domain exceptions for the OAuth bridge.

Every failure on the callback path is expressed as an OAuthBridgeError carrying
the error code and description that are sent back to the frontend. The router
converts these into error redirects; anything else becomes ``server_error``.
"""


class OAuthBridgeError(Exception):
    """Base exception for errors reported to the frontend via redirect."""

    error_code = "server_error"
    description = "An unexpected error occurred"

    def __init__(self, message: str | None = None, *, description: str | None = None):
        super().__init__(message or self.description)
        if description is not None:
            self.description = description


class TokenExchangeError(OAuthBridgeError):
    """The provider rejected the authorization code or client credentials."""

    error_code = "token_exchange_failed"
    description = "Failed to complete authorization"


class NoAccessTokenError(OAuthBridgeError):
    """The token endpoint answered 2xx without an access token."""

    error_code = "no_access_token"
    description = "No access token received"


class MissingRefreshTokenError(OAuthBridgeError):
    """
    Raised when the token exchange succeeded without a refresh token.

    Google omits the refresh token when the user granted consent earlier and
    was not prompted again. Only a fresh consent prompt resolves it.
    """

    error_code = "missing_refresh_token"
    description = (
        "No refresh token received. Please reconnect and approve access again."
    )


class ChannelFetchError(OAuthBridgeError):
    """The channel lookup failed (transport, auth or malformed response)."""

    error_code = "channel_fetch_failed"
    description = "Failed to fetch channel information"


class NoChannelError(OAuthBridgeError):
    """The authenticated account has no YouTube channel."""

    error_code = "no_channel"
    description = "No YouTube channel found for this account"


class StateMismatchError(OAuthBridgeError):
    """The CSRF nonce in ``state`` does not match the backup cookie."""

    error_code = "state_mismatch"
    description = "Authorization state did not match. Please try again."


class TokenStoreError(OAuthBridgeError):
    """Persisting channel credentials failed."""

    error_code = "server_error"
    description = "Failed to save channel credentials"


class StoreNotConfiguredError(TokenStoreError):
    """No token storage backend is configured."""

    description = "Token storage is not configured"


class ProviderDeniedError(OAuthBridgeError):
    """The provider redirected back with an ``error`` parameter."""

    description = "OAuth was denied or failed"

    def __init__(self, provider_error: str):
        super().__init__(f"Provider returned error: {provider_error}")
        self.error_code = provider_error
