"""
Tests for application lifecycle events.
"""

from unittest.mock import patch

from fastapi.testclient import TestClient

from oauth_bridge.main import app
from oauth_bridge.oauth.config import BridgeConfig


class TestApplicationLifecycle:
    """Test application lifecycle events."""

    def test_startup_and_shutdown(self):
        """Test startup loads config and shutdown closes the Firestore client."""
        config = BridgeConfig(client_id="id", client_secret="secret")

        with patch("oauth_bridge.main.get_bridge_config", return_value=config), patch(
            "oauth_bridge.main.close_firestore_client"
        ) as mock_close:
            with TestClient(app) as test_client:
                response = test_client.options("/api/auth/youtube")
                assert response.status_code == 200
                mock_close.assert_not_called()

            mock_close.assert_called_once()

    def test_unknown_route_returns_404(self):
        with patch("oauth_bridge.main.get_bridge_config", return_value=BridgeConfig()):
            with TestClient(app) as test_client:
                response = test_client.get("/api/auth/unknown")

        assert response.status_code == 404
