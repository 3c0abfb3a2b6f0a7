"""
Resolution of the frontend URI the user is sent back to.
"""

import logging
from collections.abc import Callable, Iterable
from urllib.parse import urlsplit

from oauth_bridge.core.domain import AuthorizationState


logger = logging.getLogger(__name__)


def is_absolute_uri(uri: str) -> bool:
    """Check that a URI is absolute, i.e. carries a scheme (app schemes included)."""
    try:
        return bool(urlsplit(uri).scheme)
    except ValueError:
        return False


def is_web_uri(uri: str) -> bool:
    """Check that a URI is an http(s) URI with a host."""
    try:
        parts = urlsplit(uri)
    except ValueError:
        return False
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def uri_origin(uri: str) -> str:
    """Return the ``scheme://host[:port]`` origin of an absolute URI."""
    parts = urlsplit(uri)
    return f"{parts.scheme}://{parts.netloc}".lower()


def is_redirect_allowed(uri: str, allowed_origins: Iterable[str] = ()) -> bool:
    """
    Check a frontend redirect URI against an optional origin allow-list.

    With no allow-list any absolute URI is accepted, whatever its scheme.
    Once origins are configured the URI must be http(s) and its origin listed.
    """
    origins = {origin.rstrip("/").lower() for origin in allowed_origins}
    if not origins:
        return is_absolute_uri(uri)
    return is_web_uri(uri) and uri_origin(uri) in origins


def resolve_redirect_uri(
    *,
    fallback: str,
    state: AuthorizationState | None = None,
    cookie_uri: str | None = None,
    query_uri: str | None = None,
    is_allowed: Callable[[str], bool] = is_absolute_uri,
) -> str:
    """
    Pick the frontend URI by strict precedence.

    Decoded state wins over the backup cookie, which wins over an explicit
    ``redirect_uri`` query parameter (only passed on INITIATE), which wins
    over the configured fallback. Candidates rejected by ``is_allowed`` are
    skipped.

    Args:
        fallback: Configured fallback URI, always used last
        state: Decoded authorization state, if any
        cookie_uri: Value of the ``oauth_redirect_uri`` cookie, if any
        query_uri: Explicit ``redirect_uri`` query parameter, if any
        is_allowed: Predicate applied to every candidate but the fallback

    Returns:
        The resolved URI (never empty)
    """
    candidates = (
        ("state", state.redirect_uri if state else None),
        ("cookie", cookie_uri),
        ("query", query_uri),
    )
    for source, candidate in candidates:
        if not candidate:
            continue
        if not is_allowed(candidate):
            logger.warning(
                "Ignoring disallowed redirect URI",
                extra={"source": source, "redirect_uri": candidate},
            )
            continue
        logger.info("Resolved redirect URI", extra={"source": source})
        return candidate

    logger.info("Resolved redirect URI", extra={"source": "fallback"})
    return fallback
