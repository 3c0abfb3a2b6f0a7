"""
Tests for FirestoreTokenStore.

The Firestore client is a MagicMock; only the document reference methods
the store awaits are AsyncMocks.
"""

import os
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.api_core import exceptions as google_exceptions

from oauth_bridge.channels.models import ChannelCredential
from oauth_bridge.core.exceptions import TokenStoreError
from oauth_bridge.infrastructure.encryption import (
    decrypt_token,
    generate_encryption_key,
    reset_encryption,
)
from oauth_bridge.infrastructure.firestore_token_store import FirestoreTokenStore


@pytest.fixture(autouse=True)
def encryption_key():
    reset_encryption()
    with patch.dict(os.environ, {"TOKEN_ENCRYPTION_KEY": generate_encryption_key()}):
        yield
    reset_encryption()


@pytest.fixture
def credential():
    return ChannelCredential(
        channel_id="UC123",
        title="Demo Channel",
        access_token="access",
        refresh_token="refresh",
        token_expires_at=datetime(2026, 1, 1, tzinfo=UTC),
    )


@pytest.fixture
def db():
    return MagicMock()


@pytest.fixture
def doc_ref(db):
    ref = MagicMock()
    ref.set = AsyncMock()
    db.collection.return_value.document.return_value = ref
    return ref


@pytest.fixture
def store(db):
    return FirestoreTokenStore(db)


@pytest.mark.asyncio
async def test_upsert_replaces_channel_document(store, db, doc_ref, credential):
    """Test upsert writes one document per channel with encrypted tokens."""
    await store.upsert(credential)

    db.collection.assert_called_with("channels")
    db.collection.return_value.document.assert_called_with("UC123")
    doc_ref.set.assert_awaited_once()

    record = doc_ref.set.call_args.args[0]
    assert doc_ref.set.call_args.kwargs == {}
    assert record["channel_title"] == "Demo Channel"
    assert decrypt_token(record["access_token"]) == "access"
    assert decrypt_token(record["refresh_token"]) == "refresh"
    assert record["token_expires_at"] == datetime(2026, 1, 1, tzinfo=UTC)


@pytest.mark.asyncio
async def test_upsert_wraps_api_errors(store, doc_ref, credential):
    doc_ref.set.side_effect = google_exceptions.ServiceUnavailable("unavailable")

    with pytest.raises(TokenStoreError, match="Firestore write failed"):
        await store.upsert(credential)
