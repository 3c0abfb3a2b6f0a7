"""
Firestore implementation of TokenStore.

Stores channel credentials in Firestore with encrypted token fields.
This is a driven adapter that implements the TokenStore interface.
"""

import logging

from google.api_core import exceptions as google_exceptions
from google.cloud.firestore_v1 import AsyncClient

from oauth_bridge.channels.models import ChannelCredential
from oauth_bridge.core.exceptions import TokenStoreError
from oauth_bridge.infrastructure.encryption import encrypt_token

logger = logging.getLogger(__name__)


class FirestoreTokenStore:
    """
    Firestore implementation of TokenStore.

    Data model:
    - Collection: channels
      - Document ID: {channel_id}
      - Fields: channel_id, channel_title, channel_thumbnail, custom_url,
                access_token (encrypted), refresh_token (encrypted),
                token_expires_at, scope, updated_at

    Each upsert replaces the whole document, so concurrent callbacks for the
    same channel resolve as last write wins.
    """

    COLLECTION = "channels"

    def __init__(self, db: AsyncClient):
        """
        Initialize Firestore token store.

        Args:
            db: Firestore async client instance
        """
        self._db = db
        self._channels = db.collection(self.COLLECTION)

    async def upsert(self, credential: ChannelCredential) -> None:
        """
        Overwrite the credential document for the channel.

        Args:
            credential: Credential to persist

        Raises:
            TokenStoreError: If Firestore rejects the write
        """
        record = credential.to_record()
        record["access_token"] = encrypt_token(credential.access_token)
        record["refresh_token"] = encrypt_token(credential.refresh_token)
        record["token_expires_at"] = credential.token_expires_at
        record["updated_at"] = credential.updated_at

        doc_ref = self._channels.document(credential.channel_id)
        try:
            await doc_ref.set(record)
        except google_exceptions.GoogleAPICallError as e:
            logger.error(
                f"Firestore write failed: {e}",
                extra={"channel_id": credential.channel_id},
            )
            raise TokenStoreError(f"Firestore write failed: {e}") from e

        logger.info(
            "Saved channel credential to Firestore",
            extra={"channel_id": credential.channel_id},
        )
