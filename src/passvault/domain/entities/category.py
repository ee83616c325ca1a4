"""Category entity grouping an owner's credentials."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Self
from uuid import UUID, uuid4

UNCATEGORIZED_NAME = "Uncategorized"


def normalize_name(name: str) -> str:
    """Key used for case-insensitive category name comparisons."""
    return name.strip().casefold()


@dataclass(frozen=True, slots=True)
class Category:
    """A user-defined category. Names are unique per owner, ignoring case."""

    id: UUID
    owner_id: UUID
    name: str
    icon_ref: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_uncategorized(self) -> bool:
        """Check if this is the owner's reserved fallback category."""
        return self.has_name(UNCATEGORIZED_NAME)

    def has_name(self, name: str) -> bool:
        """Compare names case-insensitively."""
        return normalize_name(self.name) == normalize_name(name)

    def renamed(self, name: str, icon_ref: str | None, *, at: datetime) -> Self:
        """Copy with a new name and icon."""
        return replace(self, name=name, icon_ref=icon_ref, updated_at=at)

    @classmethod
    def new(
        cls,
        *,
        owner_id: UUID,
        name: str,
        icon_ref: str | None = None,
        at: datetime,
    ) -> Self:
        """Factory method for a category that has not been persisted yet."""
        return cls(
            id=uuid4(),
            owner_id=owner_id,
            name=name,
            icon_ref=icon_ref,
            created_at=at,
            updated_at=at,
        )
