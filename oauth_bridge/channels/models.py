"""
Channel credential model.

A ChannelCredential is what the bridge persists after a successful callback:
the channel's public metadata plus the tokens collaborators use later.
The channel ID is the unique key.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from oauth_bridge.core.domain import Channel, TokenGrant


class ChannelCredential(BaseModel):
    """Credentials and metadata stored per YouTube channel."""

    channel_id: str = Field(description="YouTube channel ID (unique key)")
    title: str = Field(description="Channel title")
    thumbnail_url: str = Field(default="", description="Channel thumbnail URL")
    custom_url: str | None = Field(default=None, description="Channel handle")
    access_token: str = Field(description="OAuth2 access token")
    refresh_token: str = Field(description="OAuth2 refresh token")
    token_expires_at: datetime | None = Field(
        default=None, description="Access token expiry (UTC)"
    )
    scope: str | None = Field(default=None, description="Granted scopes")
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the credential was last written",
    )

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def from_grant(cls, channel: Channel, grant: TokenGrant) -> "ChannelCredential":
        """
        Build the credential for a channel from a fresh token grant.

        Args:
            channel: Channel returned by the channel fetcher
            grant: Tokens from the authorization-code exchange

        Returns:
            ChannelCredential ready to upsert
        """
        now = datetime.now(UTC)
        return cls(
            channel_id=channel.id,
            title=channel.title,
            thumbnail_url=channel.thumbnail_url,
            custom_url=channel.custom_url,
            access_token=grant.access_token,
            refresh_token=grant.refresh_token,
            token_expires_at=grant.expires_at(now),
            scope=grant.scope,
            updated_at=now,
        )

    def to_record(self) -> dict[str, Any]:
        """
        Flatten to the row shape used by the storage backends.

        Timestamps are ISO-8601 strings. Token fields are plaintext here;
        backends encrypt them as configured.
        """
        return {
            "channel_id": self.channel_id,
            "channel_title": self.title,
            "channel_thumbnail": self.thumbnail_url,
            "custom_url": self.custom_url,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "token_expires_at": (
                self.token_expires_at.isoformat() if self.token_expires_at else None
            ),
            "scope": self.scope,
            "updated_at": self.updated_at.isoformat(),
        }
