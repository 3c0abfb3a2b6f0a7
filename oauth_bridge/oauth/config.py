"""
Bridge configuration.

Loaded from environment variables once and passed to every component at
construction. Missing OAuth client credentials only break INITIATE; a
missing token store only breaks the callback.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache

from fastapi import Request

from oauth_bridge.core.redirects import is_redirect_allowed


DEFAULT_FALLBACK_REDIRECT_URI = (
    "https://insights-growth-trends.deploypad.app/oauth/callback"
)

DEFAULT_SCOPES = " ".join(
    [
        "https://www.googleapis.com/auth/youtube.readonly",
        "https://www.googleapis.com/auth/yt-analytics.readonly",
    ]
)

TOKEN_STORE_BACKENDS = ("rest", "firestore")


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass
class BridgeConfig:
    """
    OAuth bridge configuration settings.

    Loaded from environment variables via from_env().
    """

    client_id: str | None = None
    client_secret: str | None = None
    fallback_redirect_uri: str = DEFAULT_FALLBACK_REDIRECT_URI
    public_base_url: str | None = None
    default_scopes: str = DEFAULT_SCOPES
    allowed_redirect_origins: tuple[str, ...] = field(default_factory=tuple)

    token_store_backend: str = "rest"
    token_store_url: str | None = None
    token_store_key: str | None = None
    token_store_table: str = "youtube_channels"
    gcp_project_id: str | None = None
    encryption_key_set: bool = False

    http_timeout_seconds: float = 10.0

    @classmethod
    def from_env(cls) -> "BridgeConfig":
        """Load configuration from environment variables."""
        backend = os.getenv("TOKEN_STORE_BACKEND", "rest").strip().lower()
        if backend not in TOKEN_STORE_BACKENDS:
            raise ValueError(
                f"TOKEN_STORE_BACKEND must be one of {TOKEN_STORE_BACKENDS}, got '{backend}'"
            )

        return cls(
            client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
            client_secret=os.getenv("GOOGLE_CLIENT_SECRET") or None,
            fallback_redirect_uri=(
                os.getenv("DEFAULT_REDIRECT_URI") or DEFAULT_FALLBACK_REDIRECT_URI
            ),
            public_base_url=os.getenv("PUBLIC_BASE_URL") or None,
            default_scopes=os.getenv("OAUTH_SCOPES") or DEFAULT_SCOPES,
            allowed_redirect_origins=_split_csv(os.getenv("ALLOWED_REDIRECT_ORIGINS")),
            token_store_backend=backend,
            token_store_url=os.getenv("TOKEN_STORE_URL") or None,
            token_store_key=os.getenv("TOKEN_STORE_KEY") or None,
            token_store_table=os.getenv("TOKEN_STORE_TABLE") or "youtube_channels",
            gcp_project_id=(
                os.getenv("GCP_PROJECT_ID") or os.getenv("GOOGLE_CLOUD_PROJECT")
            ),
            encryption_key_set=bool(os.getenv("TOKEN_ENCRYPTION_KEY")),
            http_timeout_seconds=float(os.getenv("HTTP_TIMEOUT_SECONDS", "10")),
        )

    def is_oauth_configured(self) -> bool:
        """Check that Google client credentials are present."""
        return bool(self.client_id and self.client_secret)

    def is_store_configured(self) -> bool:
        """Check that the selected token store backend has its settings."""
        if self.token_store_backend == "firestore":
            return bool(self.gcp_project_id and self.encryption_key_set)
        return bool(self.token_store_url and self.token_store_key)

    def is_redirect_allowed(self, uri: str) -> bool:
        """Check a frontend URI against the optional origin allow-list."""
        return is_redirect_allowed(uri, self.allowed_redirect_origins)

    def get_callback_url(self, request: Request) -> str:
        """
        Build this endpoint's externally visible URL.

        Google redirects back here, and the token exchange must send the
        exact same value as ``redirect_uri``.
        """
        path = request.url.path
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}{path}"

        proto = request.headers.get("x-forwarded-proto", "https").split(",")[0].strip()
        host = request.headers.get("x-forwarded-host") or request.headers.get("host")
        if not host:
            host = request.url.netloc
        return f"{proto}://{host.split(',')[0].strip()}{path}"


@lru_cache()
def get_bridge_config() -> BridgeConfig:
    """Get bridge configuration singleton."""
    return BridgeConfig.from_env()
