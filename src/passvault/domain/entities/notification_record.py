"""Notification record entity."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

EXPIRY_NOTICE = "expiry_notice"


@dataclass(frozen=True, slots=True)
class NotificationRecord:
    """Marks that a credential's owner was notified on a given day."""

    credential_id: UUID
    notified_on: date
    notification_type: str = EXPIRY_NOTICE
