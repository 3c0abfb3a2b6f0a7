"""
OAuth bridge endpoint.

A single URL serves both legs of the flow:
- GET /api/auth/youtube                 - start the flow (redirect to Google)
- GET /api/auth/youtube?code=...        - callback, exchange and store tokens
- GET /api/auth/youtube?error=...       - callback after denial
The callback always redirects back to the frontend.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import Response

from oauth_bridge.core.domain import Phase
from oauth_bridge.core.exceptions import OAuthBridgeError, ProviderDeniedError
from oauth_bridge.core.phases import classify_request
from oauth_bridge.core.redirects import resolve_redirect_uri
from oauth_bridge.core.services import OAuthBridgeService
from oauth_bridge.core.state import decode_state
from oauth_bridge.oauth.config import BridgeConfig
from oauth_bridge.oauth.dependencies import BridgeService, Config
from oauth_bridge.oauth.responses import (
    authorization_redirect,
    error_redirect,
    json_error_response,
    preflight_response,
    read_backup_cookies,
    success_redirect,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["oauth"])

ACCEPTED_METHODS = ["GET", "OPTIONS", "HEAD", "POST", "PUT", "PATCH", "DELETE"]


@router.api_route("/youtube", methods=ACCEPTED_METHODS)
async def youtube_oauth(
    request: Request,
    config: Config,
    service: BridgeService,
) -> Response:
    """
    Route the request to the phase it belongs to.

    Args:
        request: Incoming request (query parameters, cookies, headers)
        config: Bridge configuration
        service: Bridge service wired with its collaborators

    Returns:
        Redirect, empty preflight answer or JSON error
    """
    query = request.query_params
    phase = classify_request(request.method, query)

    logger.info(
        "Request received",
        extra={
            "phase": phase.value,
            "has_code": "code" in query,
            "has_state": "state" in query,
            "has_error": "error" in query,
            "has_redirect_uri": "redirect_uri" in query,
        },
    )

    if phase is Phase.PREFLIGHT:
        return preflight_response()

    if phase is Phase.UNSUPPORTED_METHOD:
        return json_error_response(
            status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed"
        )

    if phase is Phase.INITIATE:
        return initiate(request, config, service)

    return await handle_callback(request, phase, config, service)


def initiate(
    request: Request, config: BridgeConfig, service: OAuthBridgeService
) -> Response:
    """Start the flow by redirecting to the consent screen."""
    if not config.is_oauth_configured():
        logger.error("OAuth client credentials missing")
        return json_error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "OAuth not configured",
            hint="Set GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET.",
        )

    query = request.query_params
    client_state = query.get("state")
    redirect_uri = resolve_redirect_uri(
        fallback=config.fallback_redirect_uri,
        state=decode_state(client_state),
        query_uri=query.get("redirect_uri"),
        is_allowed=config.is_redirect_allowed,
    )

    authorization = service.begin_authorization(
        redirect_uri=redirect_uri,
        callback_url=config.get_callback_url(request),
        scope=query.get("scope") or config.default_scopes,
        client_state=client_state,
    )
    return authorization_redirect(authorization)


async def handle_callback(
    request: Request,
    phase: Phase,
    config: BridgeConfig,
    service: OAuthBridgeService,
) -> Response:
    """
    Finish the flow and send the user back to the frontend.

    Every failure, expected or not, ends in an error redirect.
    """
    query = request.query_params
    state = decode_state(query.get("state"))
    cookie_redirect_uri, cookie_csrf_token = read_backup_cookies(request)

    redirect_uri = resolve_redirect_uri(
        fallback=config.fallback_redirect_uri,
        state=state,
        cookie_uri=cookie_redirect_uri,
        is_allowed=config.is_redirect_allowed,
    )

    if phase is Phase.CALLBACK_ERROR:
        provider_error = query["error"]
        logger.warning(
            "OAuth error from provider",
            extra={
                "provider_error": provider_error,
                "provider_error_description": query.get("error_description"),
            },
        )
        return error_redirect(redirect_uri, ProviderDeniedError(provider_error))

    try:
        channel = await service.complete_authorization(
            code=query["code"],
            callback_url=config.get_callback_url(request),
            state=state,
            cookie_csrf_token=cookie_csrf_token,
        )
    except OAuthBridgeError as e:
        logger.error(
            f"OAuth callback failed: {e}", extra={"error_code": e.error_code}
        )
        return error_redirect(redirect_uri, e)
    except Exception as e:
        logger.error(f"Unexpected OAuth callback error: {e}", exc_info=True)
        return error_redirect(redirect_uri, OAuthBridgeError(str(e)))

    return success_redirect(redirect_uri, channel)
