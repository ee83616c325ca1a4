"""Supabase-backed implementations of the store ports."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, date, datetime
from typing import Any, ClassVar
from uuid import UUID

from ....application.exceptions import StoreError
from ....domain.entities import Category, Credential, HistoryEntry, NotificationRecord, normalize_name
from .client import SupabaseClient, eq, ilike_exact, in_, is_null

logger = logging.getLogger(__name__)


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp from the store into an aware datetime."""
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Failed to parse datetime: %s", value)
        return None
    return dt if dt.tzinfo else dt.replace(tzinfo=UTC)


def _required(row: dict[str, Any], key: str, table: str) -> Any:
    value = row.get(key)
    if value is None:
        msg = f"Row from {table} is missing '{key}'"
        raise StoreError(msg)
    return value


def _timestamp(row: dict[str, Any], *keys: str) -> datetime:
    """First parseable timestamp among ``keys``."""
    for key in keys:
        parsed = parse_datetime(row.get(key))
        if parsed is not None:
            return parsed
    msg = f"Row {row.get('id')} has no usable timestamp in {', '.join(keys)}"
    raise StoreError(msg)


def category_from_row(row: dict[str, Any]) -> Category:
    """Map a ``categories`` row to the domain entity."""
    table = SupabaseCategoryRepository.TABLE
    return Category(
        id=UUID(str(_required(row, "id", table))),
        owner_id=UUID(str(_required(row, "owner_id", table))),
        name=_required(row, "name", table),
        icon_ref=row.get("icon_ref"),
        created_at=_timestamp(row, "created_at"),
        updated_at=_timestamp(row, "updated_at", "created_at"),
    )


def category_to_row(category: Category) -> dict[str, Any]:
    """Map a domain category to a ``categories`` row."""
    return {
        "id": str(category.id),
        "owner_id": str(category.owner_id),
        "name": category.name,
        "icon_ref": category.icon_ref,
        "created_at": category.created_at.isoformat(),
        "updated_at": category.updated_at.isoformat(),
    }


def history_from_json(raw: Any, credential_id: str) -> tuple[HistoryEntry, ...]:
    """
    Parse the stored history array, most recent first.

    Elements written by older clients use ``encrypted_password`` instead of
    ``ciphertext``; both are accepted. Unreadable elements are skipped.
    """
    entries: list[HistoryEntry] = []
    for item in raw or []:
        if not isinstance(item, dict):
            logger.warning("Skipping non-object history entry on credential %s", credential_id)
            continue
        ciphertext = item.get("ciphertext") or item.get("encrypted_password")
        changed_at = parse_datetime(item.get("changed_at"))
        if not ciphertext or changed_at is None:
            logger.warning("Skipping incomplete history entry on credential %s", credential_id)
            continue
        entries.append(HistoryEntry(ciphertext=ciphertext, changed_at=changed_at))
    return tuple(entries)


def history_to_json(history: Iterable[HistoryEntry]) -> list[dict[str, str]]:
    """Serialize history for storage."""
    return [{"ciphertext": e.ciphertext, "changed_at": e.changed_at.isoformat()} for e in history]


def credential_from_row(row: dict[str, Any]) -> Credential:
    """Map a ``credentials`` row to the domain entity."""
    table = SupabaseCredentialRepository.TABLE
    credential_id = str(_required(row, "id", table))
    category_id = row.get("category_id")
    return Credential(
        id=UUID(credential_id),
        owner_id=UUID(str(_required(row, "owner_id", table))),
        category_id=UUID(str(category_id)) if category_id else None,
        title=_required(row, "title", table),
        username=row.get("username") or "",
        secret_ciphertext=_required(row, "secret_ciphertext", table),
        website_url=row.get("website_url"),
        notes=row.get("notes"),
        history=history_from_json(row.get("history"), credential_id),
        last_modified_at=_timestamp(row, "last_modified_at", "updated_at", "created_at"),
        created_at=_timestamp(row, "created_at"),
        updated_at=_timestamp(row, "updated_at", "created_at"),
    )


def credential_to_row(credential: Credential) -> dict[str, Any]:
    """Map a domain credential to a ``credentials`` row."""
    return {
        "id": str(credential.id),
        "owner_id": str(credential.owner_id),
        "category_id": str(credential.category_id) if credential.category_id else None,
        "title": credential.title,
        "username": credential.username,
        "secret_ciphertext": credential.secret_ciphertext,
        "website_url": credential.website_url,
        "notes": credential.notes,
        "history": history_to_json(credential.history),
        "last_modified_at": credential.last_modified_at.isoformat(),
        "created_at": credential.created_at.isoformat(),
        "updated_at": credential.updated_at.isoformat(),
    }


class SupabaseCategoryRepository:
    """CategoryRepository over the ``categories`` table."""

    TABLE: ClassVar[str] = "categories"

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def get(self, owner_id: UUID, category_id: UUID) -> Category | None:
        rows = await self._client.select(
            self.TABLE, {"id": eq(category_id), "owner_id": eq(owner_id)}
        )
        return category_from_row(rows[0]) if rows else None

    async def find_by_name(self, owner_id: UUID, name: str) -> Category | None:
        rows = await self._client.select(
            self.TABLE, {"owner_id": eq(owner_id), "name": ilike_exact(name.strip())}
        )
        key = normalize_name(name)
        matches = [category_from_row(r) for r in rows]
        return next((c for c in matches if normalize_name(c.name) == key), None)

    async def list_by_owner(self, owner_id: UUID) -> list[Category]:
        rows = await self._client.select(self.TABLE, {"owner_id": eq(owner_id)}, order="name.asc")
        return [category_from_row(r) for r in rows]

    async def insert(self, category: Category) -> Category:
        return category_from_row(await self._client.insert(self.TABLE, category_to_row(category)))

    async def update(self, category: Category) -> Category | None:
        row = category_to_row(category)
        for key in ("id", "owner_id", "created_at"):
            row.pop(key)
        rows = await self._client.update(
            self.TABLE, {"id": eq(category.id), "owner_id": eq(category.owner_id)}, row
        )
        return category_from_row(rows[0]) if rows else None

    async def delete(self, owner_id: UUID, category_id: UUID) -> bool:
        rows = await self._client.delete(
            self.TABLE, {"id": eq(category_id), "owner_id": eq(owner_id)}
        )
        return bool(rows)


class SupabaseCredentialRepository:
    """CredentialRepository over the ``credentials`` table."""

    TABLE: ClassVar[str] = "credentials"

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def get(self, owner_id: UUID, credential_id: UUID) -> Credential | None:
        rows = await self._client.select(
            self.TABLE, {"id": eq(credential_id), "owner_id": eq(owner_id)}
        )
        return credential_from_row(rows[0]) if rows else None

    async def insert(self, credential: Credential) -> Credential:
        return credential_from_row(
            await self._client.insert(self.TABLE, credential_to_row(credential))
        )

    async def update(self, credential: Credential) -> Credential | None:
        row = credential_to_row(credential)
        for key in ("id", "owner_id", "created_at"):
            row.pop(key)
        rows = await self._client.update(
            self.TABLE, {"id": eq(credential.id), "owner_id": eq(credential.owner_id)}, row
        )
        return credential_from_row(rows[0]) if rows else None

    async def delete(self, owner_id: UUID, credential_id: UUID) -> bool:
        rows = await self._client.delete(
            self.TABLE, {"id": eq(credential_id), "owner_id": eq(owner_id)}
        )
        return bool(rows)

    async def list_by_owner(
        self, owner_id: UUID, category_id: UUID | None = None
    ) -> list[Credential]:
        filters = {"owner_id": eq(owner_id)}
        if category_id is not None:
            filters["category_id"] = eq(category_id)
        rows = await self._client.select(self.TABLE, filters)
        credentials = [credential_from_row(r) for r in rows]
        return sorted(credentials, key=lambda c: c.title.casefold())

    async def list_all(self) -> list[Credential]:
        rows = await self._client.select_all(self.TABLE)
        logger.info("Retrieved %d credentials from %s", len(rows), self.TABLE)
        return [credential_from_row(r) for r in rows]

    async def reassign_category(
        self, owner_id: UUID, from_category_id: UUID | None, to_category_id: UUID
    ) -> int:
        source = eq(from_category_id) if from_category_id is not None else is_null()
        rows = await self._client.update(
            self.TABLE,
            {"owner_id": eq(owner_id), "category_id": source},
            {"category_id": str(to_category_id)},
        )
        return len(rows)


class SupabaseNotificationLog:
    """NotificationLog over the ``credential_notifications`` table."""

    TABLE: ClassVar[str] = "credential_notifications"
    CHUNK: ClassVar[int] = 100

    def __init__(self, client: SupabaseClient) -> None:
        self._client = client

    async def notified_on(self, day: date, credential_ids: Iterable[UUID]) -> set[UUID]:
        ids = [str(i) for i in credential_ids]
        found: set[UUID] = set()
        for start in range(0, len(ids), self.CHUNK):
            rows = await self._client.select(
                self.TABLE,
                {
                    "notified_on": eq(day.isoformat()),
                    "credential_id": in_(ids[start : start + self.CHUNK]),
                },
            )
            found.update(UUID(str(r["credential_id"])) for r in rows)
        return found

    async def record(self, records: Iterable[NotificationRecord]) -> None:
        rows = [
            {
                "credential_id": str(r.credential_id),
                "notified_on": r.notified_on.isoformat(),
                "notification_type": r.notification_type,
            }
            for r in records
        ]
        if rows:
            await self._client.insert_ignoring_duplicates(
                self.TABLE, rows, on_conflict="credential_id,notified_on,notification_type"
            )
