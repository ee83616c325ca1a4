"""Owner contact lookup through the Supabase auth admin API."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from .client import SupabaseClient

logger = logging.getLogger(__name__)


class SupabaseOwnerDirectory:
    """OwnerDirectory backed by the project's auth users."""

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def get_contact_addresses(self, owner_ids: Iterable[UUID]) -> dict[UUID, str]:
        """Map owners to their account email addresses."""
        wanted = set(owner_ids)
        if not wanted:
            return {}

        addresses: dict[UUID, str] = {}
        for user in await self._client.list_users():
            try:
                user_id = UUID(str(user.get("id")))
            except ValueError:
                continue
            email = user.get("email")
            if user_id in wanted and email:
                addresses[user_id] = email

        missing = len(wanted) - len(addresses)
        if missing:
            logger.warning("No email found for %d owners", missing)
        return addresses
