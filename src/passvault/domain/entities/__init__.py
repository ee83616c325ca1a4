"""Domain entities - Objects with identity and lifecycle."""

from .activity_entry import ActivityEntry
from .category import UNCATEGORIZED_NAME, Category, normalize_name
from .credential import Credential, CredentialFields, HistoryEntry, ensure_utc
from .expiry_candidate import ExpiryCandidate
from .expiry_report import ExpiryReport
from .notification_record import EXPIRY_NOTICE, NotificationRecord

__all__ = [
    "EXPIRY_NOTICE",
    "UNCATEGORIZED_NAME",
    "ActivityEntry",
    "Category",
    "Credential",
    "CredentialFields",
    "ExpiryCandidate",
    "ExpiryReport",
    "HistoryEntry",
    "NotificationRecord",
    "ensure_utc",
    "normalize_name",
]
