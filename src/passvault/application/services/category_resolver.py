"""Category management and the Uncategorized fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.entities import UNCATEGORIZED_NAME, Category, normalize_name
from ...domain.exceptions import NotFoundError, ValidationError
from ..clock import Clock, utc_now
from ..exceptions import UniqueViolationError

if TYPE_CHECKING:
    from uuid import UUID

    from ..ports import CategoryRepository, CredentialRepository

logger = logging.getLogger(__name__)


class CategoryResolver:
    """
    Guarantees every credential write has a category to land in.

    Each owner has exactly one category named "Uncategorized" (compared
    case-insensitively). It is created the first time it is needed and cannot
    be renamed or deleted here.
    """

    def __init__(
        self,
        categories: CategoryRepository,
        credentials: CredentialRepository,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self._categories = categories
        self._credentials = credentials
        self._clock = clock

    async def ensure_default_category(self, owner_id: UUID) -> Category:
        """
        Return the owner's Uncategorized category, creating it if needed.

        Two concurrent first calls for the same owner race on the store's
        unique ``(owner_id, lower(name))`` constraint; the loser re-reads and
        returns the winner's row.
        """
        existing = await self._categories.find_by_name(owner_id, UNCATEGORIZED_NAME)
        if existing is not None:
            return existing

        category = Category.new(owner_id=owner_id, name=UNCATEGORIZED_NAME, at=self._clock())
        try:
            created = await self._categories.insert(category)
        except UniqueViolationError:
            winner = await self._categories.find_by_name(owner_id, UNCATEGORIZED_NAME)
            if winner is None:
                raise
            logger.debug("Uncategorized for owner %s created concurrently", owner_id)
            return winner

        logger.info("Created Uncategorized category for owner %s", owner_id)
        return created

    async def resolve_category_id(self, owner_id: UUID, requested_id: UUID | None) -> UUID:
        """
        Return ``requested_id`` when given, else the owner's Uncategorized id.

        Raises:
            NotFoundError: If ``requested_id`` is not one of the owner's categories.
        """
        if requested_id:
            category = await self._get_owned(owner_id, requested_id)
            return category.id
        default = await self.ensure_default_category(owner_id)
        return default.id

    async def list_categories(self, owner_id: UUID) -> list[Category]:
        """List an owner's categories by name."""
        return await self._categories.list_by_owner(owner_id)

    async def create_category(
        self, owner_id: UUID, name: str, icon_ref: str | None = None
    ) -> Category:
        """Create a user-named category."""
        clean = self._validate_name(name)
        if normalize_name(clean) == normalize_name(UNCATEGORIZED_NAME):
            msg = f"'{UNCATEGORIZED_NAME}' is reserved"
            raise ValidationError(msg)
        if await self._categories.find_by_name(owner_id, clean) is not None:
            msg = f"Category '{clean}' already exists"
            raise ValidationError(msg)

        category = Category.new(owner_id=owner_id, name=clean, icon_ref=icon_ref, at=self._clock())
        try:
            return await self._categories.insert(category)
        except UniqueViolationError as e:
            msg = f"Category '{clean}' already exists"
            raise ValidationError(msg) from e

    async def rename_category(
        self,
        owner_id: UUID,
        category_id: UUID,
        name: str,
        icon_ref: str | None = None,
    ) -> Category:
        """Rename a category and replace its icon reference."""
        category = await self._get_owned(owner_id, category_id)
        clean = self._validate_name(name)

        if category.is_uncategorized and not category.has_name(clean):
            msg = f"'{UNCATEGORIZED_NAME}' cannot be renamed"
            raise ValidationError(msg)
        if not category.is_uncategorized and normalize_name(clean) == normalize_name(
            UNCATEGORIZED_NAME
        ):
            msg = f"'{UNCATEGORIZED_NAME}' is reserved"
            raise ValidationError(msg)

        clash = await self._categories.find_by_name(owner_id, clean)
        if clash is not None and clash.id != category.id:
            msg = f"Category '{clean}' already exists"
            raise ValidationError(msg)

        renamed = category.renamed(clean, icon_ref, at=self._clock())
        try:
            updated = await self._categories.update(renamed)
        except UniqueViolationError as e:
            msg = f"Category '{clean}' already exists"
            raise ValidationError(msg) from e
        if updated is None:
            raise NotFoundError(f"Category {category_id} not found")
        return updated

    async def delete_category(self, owner_id: UUID, category_id: UUID) -> int:
        """
        Delete a category, moving its credentials to Uncategorized first.

        Returns:
            Number of credentials moved.
        """
        category = await self._get_owned(owner_id, category_id)
        if category.is_uncategorized:
            msg = f"'{UNCATEGORIZED_NAME}' cannot be deleted"
            raise ValidationError(msg)

        default = await self.ensure_default_category(owner_id)
        moved = await self._credentials.reassign_category(owner_id, category.id, default.id)
        await self._categories.delete(owner_id, category.id)
        logger.info(
            "Deleted category %s for owner %s, moved %d credentials", category.id, owner_id, moved
        )
        return moved

    async def migrate_uncategorized(self, owner_id: UUID) -> int:
        """Attach credentials stored without a category to Uncategorized."""
        default = await self.ensure_default_category(owner_id)
        moved = await self._credentials.reassign_category(owner_id, None, default.id)
        if moved:
            logger.info("Moved %d credentials to Uncategorized for owner %s", moved, owner_id)
        return moved

    async def _get_owned(self, owner_id: UUID, category_id: UUID) -> Category:
        category = await self._categories.get(owner_id, category_id)
        if category is None:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    @staticmethod
    def _validate_name(name: str) -> str:
        clean = (name or "").strip()
        if not clean:
            msg = "Category name is required"
            raise ValidationError(msg)
        return clean
