"""
Response construction for the OAuth bridge endpoint.

The endpoint only ever answers with a redirect or a small JSON error.
Tokens and secrets never appear in a redirect target or body.
"""

import logging
from urllib.parse import quote, unquote, urlencode, urlsplit, urlunsplit

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from oauth_bridge.core.domain import AuthorizationRequest, Channel
from oauth_bridge.core.exceptions import OAuthBridgeError


logger = logging.getLogger(__name__)


REDIRECT_URI_COOKIE = "oauth_redirect_uri"
STATE_COOKIE = "oauth_state"
COOKIE_MAX_AGE_SECONDS = 600

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
}


def append_query(uri: str, params: dict[str, str]) -> str:
    """
    Append query parameters to a URI, keeping any it already has.

    Values are percent-encoded with ``%20`` for spaces.
    """
    parts = urlsplit(uri)
    extra = urlencode(params, quote_via=quote)
    query = f"{parts.query}&{extra}" if parts.query else extra
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def read_backup_cookies(request: Request) -> tuple[str | None, str | None]:
    """Return the (redirect_uri, csrf_token) backup cookie values, if set."""
    redirect_uri = request.cookies.get(REDIRECT_URI_COOKIE)
    csrf_token = request.cookies.get(STATE_COOKIE)
    return (unquote(redirect_uri) if redirect_uri else None, csrf_token or None)


def _set_backup_cookies(response: Response, redirect_uri: str, csrf_token: str) -> None:
    for key, value in (
        (REDIRECT_URI_COOKIE, quote(redirect_uri, safe="")),
        (STATE_COOKIE, csrf_token),
    ):
        response.set_cookie(
            key=key,
            value=value,
            max_age=COOKIE_MAX_AGE_SECONDS,
            path="/",
            secure=True,
            httponly=True,
            samesite="lax",
        )


def _clear_backup_cookies(response: Response) -> None:
    for key in (REDIRECT_URI_COOKIE, STATE_COOKIE):
        response.delete_cookie(key=key, path="/", secure=True, httponly=True)


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(
        url=url, status_code=status.HTTP_302_FOUND, headers=CORS_HEADERS
    )


def preflight_response() -> Response:
    """Empty 200 answer to a CORS preflight."""
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


def json_error_response(status_code: int, error: str, **extra: str) -> JSONResponse:
    """JSON error body, used only where no frontend URI can be redirected to."""
    return JSONResponse(
        status_code=status_code,
        content={"error": error, **extra},
        headers=CORS_HEADERS,
    )


def authorization_redirect(authorization: AuthorizationRequest) -> RedirectResponse:
    """Redirect to the consent screen, mirroring state into backup cookies."""
    response = _redirect(authorization.authorization_url)
    _set_backup_cookies(response, authorization.redirect_uri, authorization.csrf_token)
    return response


def success_redirect(redirect_uri: str, channel: Channel) -> RedirectResponse:
    """Redirect back to the frontend with the connected channel's public info."""
    url = append_query(
        redirect_uri,
        {
            "success": "true",
            "channel_id": channel.id,
            "channel_title": channel.title,
            "channel_thumbnail": channel.thumbnail_url,
        },
    )
    logger.info("Redirecting to app after success", extra={"redirect_uri": redirect_uri})
    response = _redirect(url)
    _clear_backup_cookies(response)
    return response


def error_redirect(redirect_uri: str, error: OAuthBridgeError) -> RedirectResponse:
    """Redirect back to the frontend with ``error`` and ``error_description``."""
    url = append_query(
        redirect_uri,
        {"error": error.error_code, "error_description": error.description},
    )
    logger.info(
        "Redirecting to app with error",
        extra={"redirect_uri": redirect_uri, "error_code": error.error_code},
    )
    response = _redirect(url)
    _clear_backup_cookies(response)
    return response
