"""Port for category persistence - driven/secondary port."""

from typing import Protocol
from uuid import UUID

from ...domain.entities import Category


class CategoryRepository(Protocol):
    """
    Port for reading and writing category rows.

    The store enforces uniqueness of ``(owner_id, lower(name))``; an insert
    or update that violates it raises UniqueViolationError.
    """

    async def get(self, owner_id: UUID, category_id: UUID) -> Category | None:
        """Fetch one category, or None when absent or foreign-owned."""
        ...

    async def find_by_name(self, owner_id: UUID, name: str) -> Category | None:
        """Find an owner's category by case-insensitive name."""
        ...

    async def list_by_owner(self, owner_id: UUID) -> list[Category]:
        """List an owner's categories ordered by name."""
        ...

    async def insert(self, category: Category) -> Category:
        """Persist a new category and return the stored row."""
        ...

    async def update(self, category: Category) -> Category | None:
        """Overwrite an existing category; None when no row matched."""
        ...

    async def delete(self, owner_id: UUID, category_id: UUID) -> bool:
        """Remove a category; False when nothing matched."""
        ...
