"""Activity entry entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from ..value_objects import ActivityKind


@dataclass(frozen=True, slots=True)
class ActivityEntry:
    """One secret change shown in an owner's activity report."""

    credential_id: UUID
    title: str
    changed_at: datetime
    kind: ActivityKind
