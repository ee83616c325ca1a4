"""Port for secret encryption."""

from typing import Protocol

from ...domain.value_objects import DecryptedSecret


class SecretCipher(Protocol):
    """Symmetric transform between plaintext secrets and stored ciphertexts."""

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a plaintext secret."""
        ...

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt, returning a placeholder string instead of raising."""
        ...

    def try_decrypt(self, ciphertext: str) -> DecryptedSecret:
        """Decrypt into an explicit success/failure result."""
        ...
