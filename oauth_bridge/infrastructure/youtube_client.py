"""
Client for reading the authenticated user's YouTube channel.
"""

import logging

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from oauth_bridge.core.domain import Channel
from oauth_bridge.core.exceptions import ChannelFetchError, NoChannelError

logger = logging.getLogger(__name__)


YOUTUBE_CHANNELS_URL = "https://www.googleapis.com/youtube/v3/channels"

DEFAULT_CHANNEL_TITLE = "YouTube Channel"


class Thumbnail(BaseModel):
    url: str

    model_config = ConfigDict(extra="allow")


class ChannelSnippet(BaseModel):
    title: str | None = None
    custom_url: str | None = Field(default=None, alias="customUrl")
    thumbnails: dict[str, Thumbnail] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ChannelResource(BaseModel):
    id: str
    snippet: ChannelSnippet = Field(default_factory=ChannelSnippet)

    model_config = ConfigDict(extra="allow")

    def to_channel(self) -> Channel:
        """Convert to the domain Channel, applying title and thumbnail fallbacks."""
        thumbnail_url = ""
        for size in ("default", "medium", "high"):
            thumbnail = self.snippet.thumbnails.get(size)
            if thumbnail and thumbnail.url:
                thumbnail_url = thumbnail.url
                break

        return Channel(
            id=self.id,
            title=self.snippet.title or DEFAULT_CHANNEL_TITLE,
            thumbnail_url=thumbnail_url,
            custom_url=self.snippet.custom_url,
        )


class ChannelListResponse(BaseModel):
    items: list[ChannelResource] = Field(default_factory=list)

    model_config = ConfigDict(extra="allow")


class YouTubeChannelClient:
    """
    A client for the YouTube Data API channels endpoint.
    """

    def __init__(self, timeout: float = 10.0, base_url: str = YOUTUBE_CHANNELS_URL):
        self._timeout = timeout
        self._url = base_url

    async def fetch_primary_channel(self, access_token: str) -> Channel:
        """
        Fetch the channel owned by the authenticated user.

        Args:
            access_token: Bearer token from the code exchange

        Returns:
            The first channel of the account

        Raises:
            ChannelFetchError: If the API call fails or the response is malformed
            NoChannelError: If the account has no channel
        """
        params = {"part": "snippet,statistics", "mine": "true"}
        headers = {"Authorization": f"Bearer {access_token}"}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self._url, headers=headers, params=params)
                response.raise_for_status()
                data = ChannelListResponse.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Channel fetch failed: {e.response.status_code} {e.response.text}"
            )
            raise ChannelFetchError(
                f"Channel request failed: {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Network error while fetching channel: {e}")
            raise ChannelFetchError(f"Network error: {e}") from e
        except ValidationError as e:
            logger.error(f"Failed to parse channel response: {e}")
            raise ChannelFetchError(f"Invalid channel response: {e}") from e
        except ValueError as e:
            logger.error(f"Channel response is not JSON: {e}")
            raise ChannelFetchError(f"Invalid channel response: {e}") from e

        if not data.items:
            logger.error("No channel found for authenticated account")
            raise NoChannelError()

        return data.items[0].to_channel()
