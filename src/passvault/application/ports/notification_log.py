"""Port for the sent-notification log - driven/secondary port."""

from collections.abc import Iterable
from datetime import date
from typing import Protocol
from uuid import UUID

from ...domain.entities import NotificationRecord


class NotificationLog(Protocol):
    """Port recording which credentials were notified on which day."""

    async def notified_on(self, day: date, credential_ids: Iterable[UUID]) -> set[UUID]:
        """Return the subset of ``credential_ids`` already notified on ``day``."""
        ...

    async def record(self, records: Iterable[NotificationRecord]) -> None:
        """Persist records of delivered notifications."""
        ...
