"""
FastAPI dependencies for the OAuth bridge endpoint.

Every collaborator is built from the BridgeConfig for each request, so
tests can swap any of them through ``app.dependency_overrides``.
"""

from functools import partial
from typing import Annotated

from fastapi import Depends

from oauth_bridge.channels.repository import TokenStoreProvider, get_token_store
from oauth_bridge.core.ports import AuthorizationServer, ChannelFetcher
from oauth_bridge.core.services import OAuthBridgeService
from oauth_bridge.infrastructure.google_oauth import GoogleOAuthClient
from oauth_bridge.infrastructure.youtube_client import YouTubeChannelClient
from oauth_bridge.oauth.config import BridgeConfig, get_bridge_config


Config = Annotated[BridgeConfig, Depends(get_bridge_config)]


def get_authorization_server(config: Config) -> AuthorizationServer:
    """Provide the Google OAuth client."""
    return GoogleOAuthClient(
        client_id=config.client_id,
        client_secret=config.client_secret,
        timeout=config.http_timeout_seconds,
    )


def get_channel_fetcher(config: Config) -> ChannelFetcher:
    """Provide the YouTube channel client."""
    return YouTubeChannelClient(timeout=config.http_timeout_seconds)


def get_store_provider(config: Config) -> TokenStoreProvider:
    """
    Provide a callable that opens the configured token store.

    Opening is deferred to the callback so a store that cannot be created
    only fails that leg, and still ends in an error redirect.
    """
    return partial(get_token_store, config)


def get_bridge_service(
    authorization_server: Annotated[
        AuthorizationServer, Depends(get_authorization_server)
    ],
    channel_fetcher: Annotated[ChannelFetcher, Depends(get_channel_fetcher)],
    token_store_provider: Annotated[
        TokenStoreProvider, Depends(get_store_provider)
    ],
) -> OAuthBridgeService:
    """Wire the bridge service with its infrastructure dependencies."""
    return OAuthBridgeService(
        authorization_server=authorization_server,
        channel_fetcher=channel_fetcher,
        token_store_provider=token_store_provider,
    )


BridgeService = Annotated[OAuthBridgeService, Depends(get_bridge_service)]
