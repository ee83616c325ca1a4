"""Port for owner contact lookup - driven/secondary port."""

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID


class OwnerDirectory(Protocol):
    """Port for resolving owners to their contact addresses."""

    async def get_contact_addresses(self, owner_ids: Iterable[UUID]) -> dict[UUID, str]:
        """
        Look up contact addresses.

        Owners without a known address are left out of the result.

        Raises:
            StoreError: If the directory cannot be read.
        """
        ...
