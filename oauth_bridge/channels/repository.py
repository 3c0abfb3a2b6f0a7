"""
Token store interface and implementations.

Defines the port for channel credential persistence, an in-memory
implementation for tests and local wiring, and the factory that picks the
configured backend (REST or Firestore).
"""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from oauth_bridge.channels.models import ChannelCredential

if TYPE_CHECKING:
    from oauth_bridge.oauth.config import BridgeConfig


logger = logging.getLogger(__name__)


class TokenStore(Protocol):
    """
    Protocol defining the token store interface.

    Writes are keyed by channel ID. Repeated upserts for the same channel
    overwrite the previous credential entirely (last write wins, no merge).
    Writes for different channels never contend.

    The bridge only writes. Stored credentials are read by other services
    that share the backend.
    """

    async def upsert(self, credential: ChannelCredential) -> None:
        """
        Insert or overwrite the credential for its channel.

        Args:
            credential: Credential to persist

        Raises:
            TokenStoreError: If the backend rejects the write
        """
        ...


# Opens the configured store on demand; returns None when storage is not set up.
TokenStoreProvider = Callable[[], TokenStore | None]


class InMemoryTokenStore(TokenStore):
    """
    In-memory implementation of TokenStore.

    Useful for testing and local development. Data is lost when the
    process exits.
    """

    def __init__(self):
        self._credentials: dict[str, ChannelCredential] = {}

    async def upsert(self, credential: ChannelCredential) -> None:
        self._credentials[credential.channel_id] = credential.model_copy()
        logger.info(
            "Stored channel credential",
            extra={"channel_id": credential.channel_id},
        )

    async def get(self, channel_id: str) -> ChannelCredential | None:
        """Look up a stored credential; lets tests inspect what was written."""
        return self._credentials.get(channel_id)

    def __len__(self) -> int:
        return len(self._credentials)


def get_token_store(config: "BridgeConfig") -> TokenStore | None:
    """
    Build the token store for the configured backend.

    Returns None when the selected backend is missing its settings; the
    callback path treats that as fatal before calling the provider.

    Args:
        config: Bridge configuration

    Returns:
        TokenStore, or None if storage is not configured
    """
    if not config.is_store_configured():
        logger.warning(
            "Token store not configured",
            extra={"backend": config.token_store_backend},
        )
        return None

    if config.token_store_backend == "firestore":
        from oauth_bridge.infrastructure.firestore import get_firestore_client
        from oauth_bridge.infrastructure.firestore_token_store import (
            FirestoreTokenStore,
        )

        return FirestoreTokenStore(get_firestore_client(config.gcp_project_id))

    from oauth_bridge.infrastructure.rest_token_store import RestTokenStore

    return RestTokenStore(
        base_url=config.token_store_url,
        api_key=config.token_store_key,
        table=config.token_store_table,
        timeout=config.http_timeout_seconds,
    )
