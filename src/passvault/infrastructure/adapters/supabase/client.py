"""Async client for the Supabase REST (PostgREST) and auth admin APIs."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar

import httpx

from ....application.exceptions import StoreError, UniqueViolationError

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


@dataclass(frozen=True, slots=True)
class SupabaseConfig:
    """Configuration for the Supabase client."""

    url: str
    service_key: str = field(repr=False)
    timeout: float = 30.0
    page_size: int = 1000


def eq(value: object) -> str:
    """PostgREST equality filter."""
    return f"eq.{value}"


def is_null() -> str:
    """PostgREST null filter."""
    return "is.null"


def in_(values: list[str]) -> str:
    """PostgREST membership filter."""
    return f"in.({','.join(values)})"


def ilike_exact(value: str) -> str:
    """Case-insensitive equality, with LIKE wildcards escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"ilike.{escaped}"


class SupabaseClient:
    """
    Async client for a Supabase project.

    Every request is bounded by ``config.timeout``. Transport failures and
    error responses are raised as StoreError; constraint conflicts as
    UniqueViolationError. Nothing is retried here.
    """

    REST_PATH: ClassVar[str] = "/rest/v1"
    AUTH_PATH: ClassVar[str] = "/auth/v1"

    def __init__(
        self,
        config: SupabaseConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client."""
        self._config = config
        self._transport = transport

    async def select(
        self,
        table: str,
        filters: Mapping[str, str] | None = None,
        *,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[dict[str, Any]]:
        """Read rows matching all filters."""
        params: dict[str, str] = {"select": "*", **(filters or {})}
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = str(limit)
        if offset is not None:
            params["offset"] = str(offset)
        return await self._request("GET", f"{self.REST_PATH}/{table}", params=params) or []

    async def select_all(self, table: str, *, order: str = "id.asc") -> list[dict[str, Any]]:
        """
        Read every row of a table, page by page.

        Args:
            table: Table name.
            order: Stable ordering so pages do not overlap.

        Returns:
            Combined list of all rows across pages.
        """
        rows: list[dict[str, Any]] = []
        offset = 0

        while True:
            page = await self.select(table, order=order, limit=self._config.page_size, offset=offset)
            rows.extend(page)
            if len(page) < self._config.page_size:
                break
            offset += len(page)

        return rows

    async def insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one row and return it as stored."""
        created = await self._request(
            "POST",
            f"{self.REST_PATH}/{table}",
            json=dict(row),
            prefer="return=representation",
        )
        if not created:
            msg = f"Insert into {table} returned no row"
            raise StoreError(msg)
        return created[0]

    async def insert_ignoring_duplicates(
        self, table: str, rows: list[Mapping[str, Any]], *, on_conflict: str
    ) -> None:
        """Insert rows, skipping those that collide with ``on_conflict``."""
        await self._request(
            "POST",
            f"{self.REST_PATH}/{table}",
            params={"on_conflict": on_conflict},
            json=[dict(r) for r in rows],
            prefer="resolution=ignore-duplicates,return=minimal",
        )

    async def update(
        self, table: str, filters: Mapping[str, str], values: Mapping[str, Any]
    ) -> list[dict[str, Any]]:
        """Update rows matching all filters and return them."""
        return (
            await self._request(
                "PATCH",
                f"{self.REST_PATH}/{table}",
                params=dict(filters),
                json=dict(values),
                prefer="return=representation",
            )
            or []
        )

    async def delete(self, table: str, filters: Mapping[str, str]) -> list[dict[str, Any]]:
        """Delete rows matching all filters and return them."""
        return (
            await self._request(
                "DELETE",
                f"{self.REST_PATH}/{table}",
                params=dict(filters),
                prefer="return=representation",
            )
            or []
        )

    async def list_users(self) -> list[dict[str, Any]]:
        """Retrieve every auth user through the admin API."""
        users: list[dict[str, Any]] = []
        page = 1

        while True:
            data = await self._request(
                "GET",
                f"{self.AUTH_PATH}/admin/users",
                params={"page": str(page), "per_page": str(self._config.page_size)},
            )
            batch = (data or {}).get("users", [])
            users.extend(batch)
            if len(batch) < self._config.page_size:
                break
            page += 1

        logger.debug("Fetched %d users from auth admin API", len(users))
        return users

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        headers = {
            "apikey": self._config.service_key,
            "Authorization": f"Bearer {self._config.service_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer

        try:
            async with httpx.AsyncClient(
                base_url=self._config.url.rstrip("/"),
                timeout=self._config.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, params=params, json=json, headers=headers
                )
        except httpx.HTTPError as e:
            msg = f"{method} {path} failed: {e}"
            raise StoreError(msg) from e

        if response.is_error:
            self._raise_for_error(method, path, response)

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _raise_for_error(method: str, path: str, response: httpx.Response) -> None:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        detail = body.get("message") or body.get("msg") or response.text
        msg = f"{method} {path} returned {response.status_code}: {detail}"
        if response.status_code == httpx.codes.CONFLICT or body.get("code") == UNIQUE_VIOLATION:
            raise UniqueViolationError(msg)
        raise StoreError(msg)
