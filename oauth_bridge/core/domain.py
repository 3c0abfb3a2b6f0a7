"""
Core domain types for the OAuth bridge.

These values are plain and immutable. Nothing here is cached or shared
between requests: everything the callback needs arrives either in the
``state`` parameter or in the backup cookies.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import Enum


class Phase(str, Enum):
    """What an incoming request asks the bridge to do."""

    PREFLIGHT = "preflight"
    UNSUPPORTED_METHOD = "unsupported_method"
    INITIATE = "initiate"
    CALLBACK_SUCCESS = "callback_success"
    CALLBACK_ERROR = "callback_error"


@dataclass(frozen=True)
class AuthorizationState:
    """Caller intent carried through the provider round trip."""

    redirect_uri: str
    csrf_token: str


@dataclass(frozen=True)
class AuthorizationRequest:
    """Result of starting the flow: where to send the user and what to remember."""

    authorization_url: str
    redirect_uri: str
    csrf_token: str


@dataclass(frozen=True)
class TokenGrant:
    """Tokens returned by a successful authorization-code exchange."""

    access_token: str
    refresh_token: str
    expires_in: int | None = None
    scope: str | None = None
    token_type: str = "Bearer"

    def expires_at(self, now: datetime | None = None) -> datetime | None:
        """Absolute expiry of the access token, if the provider told us."""
        if self.expires_in is None:
            return None
        return (now or datetime.now(UTC)) + timedelta(seconds=self.expires_in)


@dataclass(frozen=True)
class Channel:
    """The YouTube channel that completed the consent screen."""

    id: str
    title: str
    thumbnail_url: str = ""
    custom_url: str | None = None
