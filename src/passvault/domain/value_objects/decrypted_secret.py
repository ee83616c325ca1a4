"""Decrypted secret value object."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True, slots=True)
class DecryptedSecret:
    """Outcome of a decryption attempt: the plaintext, or nothing."""

    PLACEHOLDER: ClassVar[str] = "[decryption error]"

    value: str | None

    @property
    def ok(self) -> bool:
        """Check if decryption succeeded."""
        return self.value is not None

    @property
    def display(self) -> str:
        """Plaintext, or a safe placeholder when decryption failed."""
        return self.value if self.value is not None else self.PLACEHOLDER

    @classmethod
    def failed(cls) -> "DecryptedSecret":
        """Result for a ciphertext that could not be decrypted."""
        return cls(value=None)
