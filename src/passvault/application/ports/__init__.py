"""Application ports - Interfaces for external adapters."""

from .category_repository import CategoryRepository
from .cipher import SecretCipher
from .credential_repository import CredentialRepository
from .notification_log import NotificationLog
from .notification_transport import NotificationTransport
from .owner_directory import OwnerDirectory

__all__ = [
    "CategoryRepository",
    "CredentialRepository",
    "NotificationLog",
    "NotificationTransport",
    "OwnerDirectory",
    "SecretCipher",
]
