"""Symmetric encryption of stored secrets."""

from __future__ import annotations

import base64
import binascii
import hashlib
import logging
from dataclasses import dataclass, field

from cryptography.fernet import Fernet, InvalidToken

from ...domain.exceptions import DecryptionError
from ...domain.value_objects import DecryptedSecret

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CipherConfig:
    """Key material, provisioned once at start-up."""

    key: str = field(repr=False)

    def __post_init__(self) -> None:
        """Reject an empty key."""
        if not self.key:
            msg = "Encryption key must not be empty"
            raise ValueError(msg)


class FernetCipher:
    """
    Fernet (AES-128-CBC + HMAC-SHA256) over a SHA-256 derivation of the key.

    Tokens carry a random IV, so two encryptions of one plaintext differ.
    ``decrypt`` never raises: foreign, corrupted or non-token input yields
    ``DecryptedSecret.PLACEHOLDER``.
    """

    def __init__(self, config: CipherConfig) -> None:
        """Initialize the cipher from explicit configuration."""
        derived = hashlib.sha256(config.key.encode()).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(derived))

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a plaintext secret into a URL-safe token."""
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt a token, or return the placeholder on failure."""
        return self.try_decrypt(ciphertext).display

    def try_decrypt(self, ciphertext: str) -> DecryptedSecret:
        """Decrypt a token into an explicit result."""
        try:
            return DecryptedSecret(value=self._decrypt_strict(ciphertext))
        except DecryptionError:
            logger.warning("Could not decrypt a stored secret")
            return DecryptedSecret.failed()

    def _decrypt_strict(self, ciphertext: str) -> str:
        try:
            return self._fernet.decrypt(ciphertext.encode()).decode()
        except (InvalidToken, binascii.Error, UnicodeError, TypeError, AttributeError) as e:
            raise DecryptionError("Ciphertext is malformed or was encrypted with another key") from e
