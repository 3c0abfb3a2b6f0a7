"""
Encoding of the OAuth ``state`` parameter.

The state carries ``{redirect_uri, csrf}`` as base64url-encoded JSON so it
survives the provider round trip even when cookies are dropped. It is
obfuscated, not signed: CSRF protection comes from comparing the decoded
nonce against the backup cookie.
"""

import base64
import binascii
import json
import logging
import secrets

from oauth_bridge.core.domain import AuthorizationState


logger = logging.getLogger(__name__)


def encode_state(redirect_uri: str, csrf_token: str) -> str:
    """
    Encode redirect URI and CSRF nonce into an opaque, URL-safe string.

    Args:
        redirect_uri: Frontend URI to return the user to
        csrf_token: Random nonce generated when the flow started

    Returns:
        Unpadded base64url string
    """
    payload = json.dumps(
        {"redirect_uri": redirect_uri, "csrf": csrf_token},
        separators=(",", ":"),
        sort_keys=True,
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_state(state: str | None) -> AuthorizationState | None:
    """
    Decode a state produced by encode_state.

    Malformed, foreign or incomplete values decode to None, which callers
    treat the same as "no state supplied".

    Args:
        state: Raw ``state`` query parameter

    Returns:
        AuthorizationState, or None if the value cannot be decoded
    """
    if not state:
        return None

    try:
        padding = "=" * (-len(state) % 4)
        raw = base64.urlsafe_b64decode(f"{state}{padding}".encode("ascii"))
        payload = json.loads(raw.decode("utf-8"))
    except (ValueError, binascii.Error, UnicodeError, RecursionError):
        logger.debug("State parameter is not an encoded authorization state")
        return None

    if not isinstance(payload, dict):
        return None

    redirect_uri = payload.get("redirect_uri")
    csrf_token = payload.get("csrf")
    if not isinstance(redirect_uri, str) or not isinstance(csrf_token, str):
        return None
    if not redirect_uri or not csrf_token:
        return None

    return AuthorizationState(redirect_uri=redirect_uri, csrf_token=csrf_token)


def generate_csrf_token() -> str:
    """Generate a random nonce for a new authorization flow."""
    return secrets.token_urlsafe(24)
