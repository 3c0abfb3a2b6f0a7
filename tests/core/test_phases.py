"""
Tests for request phase classification.
"""

import pytest

from oauth_bridge.core.domain import Phase
from oauth_bridge.core.phases import classify_request


@pytest.mark.parametrize("method", ["POST", "PUT", "PATCH", "DELETE", "HEAD"])
def test_other_methods_are_unsupported(method):
    assert classify_request(method, {"code": "abc"}) is Phase.UNSUPPORTED_METHOD


def test_options_is_preflight():
    assert classify_request("OPTIONS", {"error": "access_denied"}) is Phase.PREFLIGHT


def test_error_wins_over_code():
    """Providers may send both when the user cancels."""
    query = {"error": "access_denied", "code": "abc123"}

    assert classify_request("GET", query) is Phase.CALLBACK_ERROR


def test_code_is_callback_success():
    assert classify_request("GET", {"code": "abc123", "state": "x"}) is (
        Phase.CALLBACK_SUCCESS
    )


def test_no_params_is_initiate():
    assert classify_request("GET", {}) is Phase.INITIATE


def test_redirect_uri_only_is_initiate():
    query = {"redirect_uri": "https://app.example/cb", "scope": "a b"}

    assert classify_request("get", query) is Phase.INITIATE


def test_empty_code_is_initiate():
    assert classify_request("GET", {"code": ""}) is Phase.INITIATE
