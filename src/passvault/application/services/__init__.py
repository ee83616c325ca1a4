"""Application services - Operations over ports on behalf of an owner."""

from .activity_reporter import ActivityReporter
from .category_resolver import CategoryResolver
from .credential_store import CredentialStore
from .expiry_scanner import ExpiryScanner
from .notification_dispatcher import DispatchResult, NotificationDispatcher

__all__ = [
    "ActivityReporter",
    "CategoryResolver",
    "CredentialStore",
    "DispatchResult",
    "ExpiryScanner",
    "NotificationDispatcher",
]
