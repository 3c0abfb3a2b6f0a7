"""
Shared test configuration and fixtures.
"""

import os
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

with patch.dict(os.environ, {"TOKEN_STORE_BACKEND": "rest"}):
    from oauth_bridge.main import app

from oauth_bridge.channels.repository import InMemoryTokenStore
from oauth_bridge.oauth.config import BridgeConfig, get_bridge_config
from oauth_bridge.oauth.dependencies import get_store_provider


BRIDGE_URL = "/api/auth/youtube"
CALLBACK_URL = "https://bridge.example/api/auth/youtube"
FALLBACK_URI = "https://app.example/fallback"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
YOUTUBE_CHANNELS_URL = "https://www.googleapis.com/youtube/v3/channels"


@pytest.fixture
def bridge_config():
    """Fully configured bridge."""
    return BridgeConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        fallback_redirect_uri=FALLBACK_URI,
        public_base_url="https://bridge.example",
        token_store_url="https://store.example",
        token_store_key="test-store-key",
    )


@pytest.fixture
def token_store():
    """Fresh in-memory token store."""
    return InMemoryTokenStore()


@pytest.fixture
def client(bridge_config, token_store):
    """Test client with config and token store overridden."""
    app.dependency_overrides[get_bridge_config] = lambda: bridge_config
    app.dependency_overrides[get_store_provider] = lambda: lambda: token_store

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def token_response():
    """Successful Google token endpoint payload."""
    return {
        "access_token": "ya29.test-access-token",
        "refresh_token": "1//test-refresh-token",
        "expires_in": 3599,
        "scope": "https://www.googleapis.com/auth/youtube.readonly",
        "token_type": "Bearer",
    }


@pytest.fixture
def channel_response():
    """YouTube channels.list payload for a single channel."""
    return {
        "kind": "youtube#channelListResponse",
        "items": [
            {
                "kind": "youtube#channel",
                "id": "UC123",
                "snippet": {
                    "title": "Demo Channel",
                    "customUrl": "@demochannel",
                    "thumbnails": {
                        "default": {"url": "https://yt.example/thumb.jpg"},
                        "medium": {"url": "https://yt.example/thumb_medium.jpg"},
                    },
                },
                "statistics": {"subscriberCount": "42"},
            }
        ],
    }
