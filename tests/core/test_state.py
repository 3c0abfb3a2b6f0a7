"""
Tests for the state parameter codec.
"""

import base64

import pytest

from oauth_bridge.core.domain import AuthorizationState
from oauth_bridge.core.state import decode_state, encode_state, generate_csrf_token


class TestEncodeDecode:
    """Round trips through encode_state/decode_state."""

    @pytest.mark.parametrize(
        "redirect_uri",
        [
            "https://app.example/oauth/callback",
            "https://app.example/cb?next=/dashboard&tab=a%20b#frag",
            "http://localhost:3000/callback?x=1&y=ü",
        ],
    )
    def test_round_trip(self, redirect_uri):
        """Test decode(encode(r, c)) returns the same pair."""
        state = encode_state(redirect_uri, "nonce-123")

        assert decode_state(state) == AuthorizationState(
            redirect_uri=redirect_uri, csrf_token="nonce-123"
        )

    def test_encoding_is_deterministic(self):
        """Test the same input always encodes to the same value."""
        first = encode_state("https://app.example/cb", "abc")
        second = encode_state("https://app.example/cb", "abc")

        assert first == second

    def test_encoding_is_url_safe(self):
        """Test encoded state needs no escaping in a query string."""
        state = encode_state("https://app.example/cb?a=1&b=2", "n+o/n=ce")

        assert all(ch.isalnum() or ch in "-_" for ch in state)


class TestDecodeFailsClosed:
    """decode_state returns None instead of raising."""

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "not-base64!!!",
            "%%%",
            "ü-non-ascii",
            "a",
            base64.urlsafe_b64encode(b"not json").decode(),
            base64.urlsafe_b64encode(b"[1, 2, 3]").decode(),
            base64.urlsafe_b64encode(b'{"redirect_uri": "https://x"}').decode(),
            base64.urlsafe_b64encode(b'{"csrf": "abc"}').decode(),
            base64.urlsafe_b64encode(b'{"redirect_uri": "", "csrf": "abc"}').decode(),
            base64.urlsafe_b64encode(b'{"redirect_uri": 1, "csrf": "abc"}').decode(),
            base64.urlsafe_b64encode(b"\xff\xfe\xfd").decode(),
            base64.urlsafe_b64encode(b"[" * 5000).decode(),
        ],
    )
    def test_invalid_input_returns_none(self, value):
        """Test malformed or foreign values decode to None."""
        assert decode_state(value) is None

    def test_plain_client_nonce_is_not_a_state(self):
        """Test a random caller nonce does not decode as a state."""
        assert decode_state(generate_csrf_token()) is None


def test_generate_csrf_token_is_random():
    """Test two generated nonces differ."""
    assert generate_csrf_token() != generate_csrf_token()
