"""Domain exceptions."""


class DomainError(Exception):
    """Base exception for domain errors."""


class ValidationError(DomainError):
    """Raised when a required field is missing or a value is not acceptable."""


class NotFoundError(DomainError):
    """Raised when a record does not exist or belongs to another owner."""


class DecryptionError(DomainError):
    """Raised inside the cipher when a ciphertext cannot be decrypted."""


class InvalidPolicyError(DomainError):
    """Raised when freshness policy values are inconsistent."""
