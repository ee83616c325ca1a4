"""Expiry candidate entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Self
from uuid import UUID

from ..value_objects import FreshnessPolicy
from .credential import Credential


@dataclass(frozen=True, slots=True)
class ExpiryCandidate:
    """A credential found inside the notice window by a scan."""

    credential_id: UUID
    owner_id: UUID
    title: str
    last_modified_at: datetime
    age_days: int
    days_until_expiry: int

    @classmethod
    def from_credential(
        cls, credential: Credential, *, now: datetime, policy: FreshnessPolicy
    ) -> Self:
        """Snapshot the scan-relevant fields of a credential."""
        age = credential.age_days(now)
        return cls(
            credential_id=credential.id,
            owner_id=credential.owner_id,
            title=credential.title,
            last_modified_at=credential.last_modified_at,
            age_days=age,
            days_until_expiry=policy.days_until_expiry(age),
        )
