"""
FastAPI application for the YouTube OAuth bridge.

This module wires the application together. Flow logic lives in
oauth_bridge/core, provider and storage adapters in
oauth_bridge/infrastructure.
"""

import logging
import os
from contextlib import asynccontextmanager

# Configure logging FIRST, before other local imports
from oauth_bridge.logging_config import setup_global_logging

setup_global_logging()

from fastapi import FastAPI, Request, status  # noqa: E402
from fastapi.exception_handlers import http_exception_handler  # noqa: E402
from starlette.exceptions import HTTPException as StarletteHTTPException  # noqa: E402

from oauth_bridge.infrastructure.firestore import close_firestore_client  # noqa: E402
from oauth_bridge.oauth import router as oauth_router  # noqa: E402
from oauth_bridge.oauth.config import get_bridge_config  # noqa: E402
from oauth_bridge.oauth.responses import json_error_response  # noqa: E402

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Load configuration at startup so a bad environment fails fast, and
    close the Firestore client on shutdown.
    """
    config = get_bridge_config()
    logger.info(
        "Application starting up",
        extra={
            "oauth_configured": config.is_oauth_configured(),
            "token_store_backend": config.token_store_backend,
            "token_store_configured": config.is_store_configured(),
        },
    )
    yield
    logger.info("Application shutting down")
    close_firestore_client()


app = FastAPI(
    title="YouTube OAuth Bridge",
    description="Stateless OAuth2 authorization-code bridge for YouTube channels",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(oauth_router.router)


@app.exception_handler(StarletteHTTPException)
async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """
    Answer methods the router does not list with the endpoint's own 405 body.

    Other HTTP errors keep FastAPI's default handling.
    """
    if exc.status_code != status.HTTP_405_METHOD_NOT_ALLOWED:
        return await http_exception_handler(request, exc)

    logger.info("Method not allowed", extra={"method": request.method})
    return json_error_response(
        status.HTTP_405_METHOD_NOT_ALLOWED, "Method not allowed"
    )


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8080))
    uvicorn.run(app, host="0.0.0.0", port=port)
