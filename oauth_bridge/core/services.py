"""
Core service orchestrating the authorization-code round trip.

The service is stateless: INITIATE encodes everything the callback needs
into ``state`` (and the caller mirrors it into backup cookies), and the
callback reconstructs it from the request alone.
"""

import hmac
import logging

from oauth_bridge.channels.models import ChannelCredential
from oauth_bridge.channels.repository import TokenStore, TokenStoreProvider
from oauth_bridge.core.domain import (
    AuthorizationRequest,
    AuthorizationState,
    Channel,
)
from oauth_bridge.core.exceptions import StateMismatchError, StoreNotConfiguredError
from oauth_bridge.core.ports import AuthorizationServer, ChannelFetcher
from oauth_bridge.core.state import decode_state, encode_state, generate_csrf_token


logger = logging.getLogger(__name__)


class OAuthBridgeService:
    """
    Runs the two legs of the flow against injected collaborators.
    """

    def __init__(
        self,
        authorization_server: AuthorizationServer,
        channel_fetcher: ChannelFetcher,
        token_store_provider: TokenStoreProvider,
    ):
        self._authorization_server = authorization_server
        self._channel_fetcher = channel_fetcher
        self._token_store_provider = token_store_provider

    def begin_authorization(
        self,
        *,
        redirect_uri: str,
        callback_url: str,
        scope: str,
        client_state: str | None = None,
    ) -> AuthorizationRequest:
        """
        Build the consent URL for a new flow.

        A caller-supplied ``state`` that is not itself an encoded
        authorization state is adopted as the CSRF nonce.

        Args:
            redirect_uri: Resolved frontend URI to return to
            callback_url: This bridge's own callback URL
            scope: Space-delimited scopes to request
            client_state: Raw ``state`` query parameter, if any

        Returns:
            AuthorizationRequest with the consent URL and the values to mirror
            into backup cookies
        """
        csrf_token = client_state
        if not csrf_token or decode_state(csrf_token) is not None:
            csrf_token = generate_csrf_token()

        state = encode_state(redirect_uri, csrf_token)
        authorization_url = self._authorization_server.create_authorization_url(
            callback_url, scope, state
        )

        logger.info(
            "Initiating OAuth flow",
            extra={"redirect_uri": redirect_uri, "callback_url": callback_url},
        )
        return AuthorizationRequest(
            authorization_url=authorization_url,
            redirect_uri=redirect_uri,
            csrf_token=csrf_token,
        )

    async def complete_authorization(
        self,
        *,
        code: str,
        callback_url: str,
        state: AuthorizationState | None = None,
        cookie_csrf_token: str | None = None,
    ) -> Channel:
        """
        Exchange the code, look up the channel and persist its tokens.

        The three calls are sequential and each is attempted once.

        Args:
            code: Authorization code from the provider
            callback_url: This bridge's own callback URL
            state: Decoded authorization state, if any
            cookie_csrf_token: Value of the ``oauth_state`` backup cookie, if any

        Returns:
            The connected channel

        Raises:
            StateMismatchError: Decoded nonce and cookie nonce differ
            StoreNotConfiguredError: No token store is configured or it could
                not be opened
            OAuthBridgeError: Any failure from the collaborators
        """
        verify_csrf_token(state, cookie_csrf_token)

        token_store = self._open_token_store()

        logger.info("Exchanging authorization code")
        grant = await self._authorization_server.exchange_code(code, callback_url)

        logger.info("Token obtained, fetching channel")
        channel = await self._channel_fetcher.fetch_primary_channel(grant.access_token)

        await token_store.upsert(ChannelCredential.from_grant(channel, grant))

        logger.info(
            "Channel connected",
            extra={"channel_id": channel.id, "channel_title": channel.title},
        )
        return channel

    def _open_token_store(self) -> TokenStore:
        try:
            token_store = self._token_store_provider()
        except Exception as e:
            logger.error(f"Token store could not be opened: {e}", exc_info=True)
            raise StoreNotConfiguredError(
                f"Token store could not be opened: {e}"
            ) from e

        if token_store is None:
            raise StoreNotConfiguredError()
        return token_store


def verify_csrf_token(
    state: AuthorizationState | None, cookie_csrf_token: str | None
) -> None:
    """
    Compare the nonce from ``state`` with the backup cookie.

    Cookies are best-effort, so the check only applies when both are present.

    Raises:
        StateMismatchError: If both are present and differ
    """
    if state is None or not cookie_csrf_token:
        return
    if not hmac.compare_digest(
        state.csrf_token.encode("utf-8"), cookie_csrf_token.encode("utf-8")
    ):
        logger.warning("CSRF token in state does not match cookie")
        raise StateMismatchError()
