"""Recent secret-change activity for one owner."""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

from ...domain.entities import ActivityEntry, ensure_utc
from ...domain.value_objects import ActivityKind

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from ..ports import CredentialRepository


class ActivityReporter:
    """Builds an owner's change log from current stamps and history entries."""

    def __init__(self, repository: CredentialRepository) -> None:
        self._repository = repository

    async def recent_changes(
        self, owner_id: UUID, now: datetime, *, days: int = 30
    ) -> list[ActivityEntry]:
        """Changes within the last ``days`` days, newest first."""
        since = ensure_utc(now) - timedelta(days=days)
        entries: list[ActivityEntry] = []

        for credential in await self._repository.list_by_owner(owner_id):
            entries.append(
                ActivityEntry(
                    credential_id=credential.id,
                    title=credential.title,
                    changed_at=credential.last_modified_at,
                    kind=ActivityKind.CURRENT,
                )
            )
            entries.extend(
                ActivityEntry(
                    credential_id=credential.id,
                    title=credential.title,
                    changed_at=entry.changed_at,
                    kind=ActivityKind.PREVIOUS,
                )
                for entry in credential.history
            )

        recent = [e for e in entries if ensure_utc(e.changed_at) >= since]
        return sorted(recent, key=lambda e: ensure_utc(e.changed_at), reverse=True)
