"""
Encryption of channel tokens at rest.

Access and refresh tokens are wrapped with Fernet before a token store
writes them. The key comes from TOKEN_ENCRYPTION_KEY; Firestore requires it,
the REST store uses it when present.
"""

import logging
import os
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from oauth_bridge.core.exceptions import TokenStoreError

logger = logging.getLogger(__name__)

KEY_ENV_VAR = "TOKEN_ENCRYPTION_KEY"


class EncryptionError(TokenStoreError):
    """A stored token could not be decrypted with the configured key."""


class TokenCipher:
    """Fernet wrapper working on str tokens."""

    def __init__(self, key: str):
        try:
            self._fernet = Fernet(key.encode())
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid {KEY_ENV_VAR}: {e}") from e

    def encrypt(self, token: str) -> str:
        return self._fernet.encrypt(token.encode()).decode()

    def decrypt(self, stored: str) -> str:
        try:
            return self._fernet.decrypt(stored.encode()).decode()
        except InvalidToken as e:
            logger.error("Stored token could not be decrypted")
            raise EncryptionError("Decryption failed: wrong key or corrupted value") from e


@lru_cache()
def _cipher_for(key: str) -> TokenCipher:
    logger.info("Token encryption initialized")
    return TokenCipher(key)


def get_token_cipher() -> TokenCipher:
    """
    Return the cipher for the current TOKEN_ENCRYPTION_KEY.

    Raises:
        ValueError: If the key is unset or not a valid Fernet key
    """
    key = os.getenv(KEY_ENV_VAR)
    if not key:
        raise ValueError(f"{KEY_ENV_VAR} must be set to encrypt channel tokens")
    return _cipher_for(key)


def encrypt_token(token: str) -> str:
    """Encrypt a token, failing if no key is configured."""
    return get_token_cipher().encrypt(token)


def decrypt_token(stored: str) -> str:
    """
    Decrypt a token written by encrypt_token.

    Raises:
        EncryptionError: If the value does not decrypt with the current key
    """
    return get_token_cipher().decrypt(stored)


def encrypt_if_configured(token: str) -> str:
    """Encrypt when a key is configured, otherwise store the token as is."""
    if not os.getenv(KEY_ENV_VAR):
        return token
    return encrypt_token(token)


def generate_encryption_key() -> str:
    """New random value for TOKEN_ENCRYPTION_KEY."""
    return Fernet.generate_key().decode()


def reset_encryption() -> None:
    """Forget cached ciphers (tests switch keys)."""
    _cipher_for.cache_clear()
