"""Port for credential persistence - driven/secondary port."""

from typing import Protocol
from uuid import UUID

from ...domain.entities import Credential


class CredentialRepository(Protocol):
    """
    Port for reading and writing credential rows.

    Every owner-facing call is scoped by ``owner_id``; a row belonging to a
    different owner behaves exactly like a missing row. Implementations raise
    StoreError when the underlying store fails.
    """

    async def get(self, owner_id: UUID, credential_id: UUID) -> Credential | None:
        """Fetch one credential, or None when absent or foreign-owned."""
        ...

    async def insert(self, credential: Credential) -> Credential:
        """Persist a new credential and return the stored row."""
        ...

    async def update(self, credential: Credential) -> Credential | None:
        """Overwrite an existing credential; None when no row matched."""
        ...

    async def delete(self, owner_id: UUID, credential_id: UUID) -> bool:
        """Remove a credential with its history; False when nothing matched."""
        ...

    async def list_by_owner(
        self, owner_id: UUID, category_id: UUID | None = None
    ) -> list[Credential]:
        """List an owner's credentials, optionally for one category, by title."""
        ...

    async def list_all(self) -> list[Credential]:
        """
        List every credential across all owners.

        Only the expiry scan uses this; it runs with service privileges.
        """
        ...

    async def reassign_category(
        self, owner_id: UUID, from_category_id: UUID | None, to_category_id: UUID
    ) -> int:
        """
        Move an owner's credentials between categories.

        ``from_category_id=None`` selects rows without a category. Returns the
        number of rows moved. Does not touch ``last_modified_at``.
        """
        ...
