"""Expiry report aggregate root."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from ..value_objects import FreshnessPolicy, RotationUrgency
from .expiry_candidate import ExpiryCandidate


@dataclass(slots=True)
class ExpiryReport:
    """Aggregate root representing the outcome of one expiry scan."""

    candidates: list[ExpiryCandidate]
    policy: FreshnessPolicy
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    _by_owner: dict[UUID, list[ExpiryCandidate]] = field(
        init=False, repr=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        """Group candidates by owner, most urgent first."""
        self._by_owner = {}
        for candidate in self.get_candidates_sorted_by_urgency():
            self._by_owner.setdefault(candidate.owner_id, []).append(candidate)

    @property
    def by_owner(self) -> dict[UUID, list[ExpiryCandidate]]:
        """Candidates keyed by owner id."""
        return self._by_owner

    @property
    def owner_ids(self) -> list[UUID]:
        """Owners with at least one candidate."""
        return list(self._by_owner)

    @property
    def owner_count(self) -> int:
        """Count of owners to notify."""
        return len(self._by_owner)

    @property
    def total_count(self) -> int:
        """Total candidate count."""
        return len(self.candidates)

    @property
    def due_count(self) -> int:
        """Candidates that have reached the freshness threshold."""
        return sum(
            1 for c in self.candidates if self.policy.urgency(c.age_days) is RotationUrgency.DUE
        )

    @property
    def urgency(self) -> RotationUrgency:
        """Most pressing rotation urgency among the candidates."""
        return RotationUrgency.most_pressing(
            self.policy.urgency(c.age_days) for c in self.candidates
        )

    @property
    def requires_notification(self) -> bool:
        """Check if this report warrants sending notifications."""
        return bool(self.candidates)

    def get_summary(self) -> str:
        """Generate a human-readable summary of the report."""
        if not self.candidates:
            return "No passwords are due for rotation"

        parts = [f"{self.total_count} passwords approaching expiry"]
        if self.due_count:
            parts.append(f"{self.due_count} due today")
        parts.append(f"{self.owner_count} owners affected")
        return ", ".join(parts)

    def get_candidates_sorted_by_urgency(self) -> list[ExpiryCandidate]:
        """Get all candidates sorted by urgency (most urgent first)."""
        return sorted(self.candidates, key=lambda c: (c.days_until_expiry, c.title.casefold()))

    def get_candidates_for_owner(self, owner_id: UUID) -> list[ExpiryCandidate]:
        """Get one owner's candidates, most urgent first."""
        return list(self._by_owner.get(owner_id, []))
