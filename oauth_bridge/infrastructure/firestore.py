"""
Shared Firestore AsyncClient for the Firestore token store.

One client is opened per process on first use and closed from the
application lifespan. FIRESTORE_EMULATOR_HOST is honoured by the client
library itself.
"""

import logging
import os

from google.cloud.firestore_v1 import AsyncClient

logger = logging.getLogger(__name__)

_client: AsyncClient | None = None


def get_firestore_client(project_id: str | None) -> AsyncClient:
    """
    Return the process-wide client, creating it for ``project_id`` if needed.

    Raises:
        ValueError: If no client exists yet and no project is given
    """
    global _client

    if _client is None:
        if not project_id:
            raise ValueError("Firestore token store needs GCP_PROJECT_ID")
        _client = AsyncClient(project=project_id)
        logger.info(
            "Firestore client opened",
            extra={
                "project_id": project_id,
                "emulator_host": os.getenv("FIRESTORE_EMULATOR_HOST"),
            },
        )

    return _client


def close_firestore_client() -> None:
    """Close the shared client on shutdown; no-op if it was never opened."""
    global _client

    if _client is None:
        return
    _client.close()
    _client = None
    logger.info("Firestore client closed")


def reset_firestore_client() -> None:
    global _client
    _client = None
