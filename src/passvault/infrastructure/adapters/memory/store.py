"""In-process implementations of the store ports."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date
from uuid import UUID

from ....application.exceptions import UniqueViolationError
from ....domain.entities import Category, Credential, NotificationRecord, normalize_name


class InMemoryCategoryRepository:
    """Category rows held in a dict, with the per-owner unique name rule."""

    def __init__(self) -> None:
        self._rows: dict[UUID, Category] = {}

    async def get(self, owner_id: UUID, category_id: UUID) -> Category | None:
        row = self._rows.get(category_id)
        return row if row is not None and row.owner_id == owner_id else None

    async def find_by_name(self, owner_id: UUID, name: str) -> Category | None:
        key = normalize_name(name)
        return next(
            (
                row
                for row in self._rows.values()
                if row.owner_id == owner_id and normalize_name(row.name) == key
            ),
            None,
        )

    async def list_by_owner(self, owner_id: UUID) -> list[Category]:
        rows = [row for row in self._rows.values() if row.owner_id == owner_id]
        return sorted(rows, key=lambda r: r.name.casefold())

    async def insert(self, category: Category) -> Category:
        self._check_unique(category)
        self._rows[category.id] = category
        return category

    async def update(self, category: Category) -> Category | None:
        if await self.get(category.owner_id, category.id) is None:
            return None
        self._check_unique(category)
        self._rows[category.id] = category
        return category

    async def delete(self, owner_id: UUID, category_id: UUID) -> bool:
        if await self.get(owner_id, category_id) is None:
            return False
        del self._rows[category_id]
        return True

    def _check_unique(self, category: Category) -> None:
        key = normalize_name(category.name)
        for row in self._rows.values():
            if (
                row.id != category.id
                and row.owner_id == category.owner_id
                and normalize_name(row.name) == key
            ):
                msg = f"Category name '{category.name}' already used by owner {category.owner_id}"
                raise UniqueViolationError(msg)


class InMemoryCredentialRepository:
    """Credential rows held in a dict."""

    def __init__(self) -> None:
        self._rows: dict[UUID, Credential] = {}

    async def get(self, owner_id: UUID, credential_id: UUID) -> Credential | None:
        row = self._rows.get(credential_id)
        return row if row is not None and row.owner_id == owner_id else None

    async def insert(self, credential: Credential) -> Credential:
        if credential.id in self._rows:
            msg = f"Credential {credential.id} already exists"
            raise UniqueViolationError(msg)
        self._rows[credential.id] = credential
        return credential

    async def update(self, credential: Credential) -> Credential | None:
        if await self.get(credential.owner_id, credential.id) is None:
            return None
        self._rows[credential.id] = credential
        return credential

    async def delete(self, owner_id: UUID, credential_id: UUID) -> bool:
        if await self.get(owner_id, credential_id) is None:
            return False
        del self._rows[credential_id]
        return True

    async def list_by_owner(
        self, owner_id: UUID, category_id: UUID | None = None
    ) -> list[Credential]:
        rows = [
            row
            for row in self._rows.values()
            if row.owner_id == owner_id and (category_id is None or row.category_id == category_id)
        ]
        return sorted(rows, key=lambda r: r.title.casefold())

    async def list_all(self) -> list[Credential]:
        return list(self._rows.values())

    async def reassign_category(
        self, owner_id: UUID, from_category_id: UUID | None, to_category_id: UUID
    ) -> int:
        moved = 0
        for row in list(self._rows.values()):
            if row.owner_id == owner_id and row.category_id == from_category_id:
                self._rows[row.id] = replace(row, category_id=to_category_id)
                moved += 1
        return moved


class InMemoryNotificationLog:
    """Sent-notice records held in a set."""

    def __init__(self) -> None:
        self._records: set[NotificationRecord] = set()

    async def notified_on(self, day: date, credential_ids: Iterable[UUID]) -> set[UUID]:
        wanted = set(credential_ids)
        return {r.credential_id for r in self._records if r.notified_on == day} & wanted

    async def record(self, records: Iterable[NotificationRecord]) -> None:
        self._records.update(records)


class StaticOwnerDirectory:
    """Owner addresses supplied up front."""

    def __init__(self, addresses: Mapping[UUID, str] | None = None) -> None:
        self._addresses = dict(addresses or {})

    def register(self, owner_id: UUID, address: str) -> None:
        """Add or replace an owner's address."""
        self._addresses[owner_id] = address

    async def get_contact_addresses(self, owner_ids: Iterable[UUID]) -> dict[UUID, str]:
        return {oid: self._addresses[oid] for oid in owner_ids if oid in self._addresses}
