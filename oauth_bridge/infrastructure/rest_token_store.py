"""
REST implementation of TokenStore.

Upserts channel credentials into a PostgREST-compatible table (for example
a Supabase project) using ``on_conflict`` so that the channel ID is the
unique key and the latest write wins.
"""

import logging

import httpx

from oauth_bridge.channels.models import ChannelCredential
from oauth_bridge.core.exceptions import TokenStoreError
from oauth_bridge.infrastructure.encryption import encrypt_if_configured

logger = logging.getLogger(__name__)


class RestTokenStore:
    """Token store backed by a PostgREST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "youtube_channels",
        timeout: float = 10.0,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._table = table
        self._timeout = timeout

    @property
    def table_url(self) -> str:
        return f"{self._base_url}/rest/v1/{self._table}"

    def _get_headers(self) -> dict:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Prefer": "resolution=merge-duplicates,return=minimal",
        }

    async def upsert(self, credential: ChannelCredential) -> None:
        """
        Insert or overwrite the row for the channel.

        Raises:
            TokenStoreError: On non-2xx responses or network errors
        """
        record = credential.to_record()
        # youtube_channels has no scope column
        record.pop("scope")
        record["access_token"] = encrypt_if_configured(credential.access_token)
        record["refresh_token"] = encrypt_if_configured(credential.refresh_token)

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self.table_url,
                    params={"on_conflict": "channel_id"},
                    headers=self._get_headers(),
                    json=record,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Token store rejected upsert: {e.response.status_code} {e.response.text}",
                extra={"channel_id": credential.channel_id},
            )
            raise TokenStoreError(
                f"Token store upsert failed: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error(
                f"Network error writing to token store: {e}",
                extra={"channel_id": credential.channel_id},
            )
            raise TokenStoreError(f"Network error: {e}") from e

        logger.info(
            "Saved channel credential",
            extra={"channel_id": credential.channel_id},
        )
