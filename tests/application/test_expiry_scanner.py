"""Tests for ExpiryScanner service."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from uuid import UUID

import pytest

from passvault.application.services import ExpiryScanner
from passvault.domain.entities import Credential
from passvault.domain.value_objects import ExpiryWindow, FreshnessPolicy
from passvault.infrastructure.adapters.memory import InMemoryCredentialRepository


class TestExpiryScanner:
    """Tests for ExpiryScanner service."""

    @pytest.mark.asyncio
    async def test_includes_27_days_excludes_10_days(
        self,
        credential_repository: InMemoryCredentialRepository,
        default_policy: FreshnessPolicy,
        make_credential: Callable[..., Credential],
        owner_id: UUID,
        now: datetime,
    ) -> None:
        """A 27-day-old secret is a candidate, a 10-day-old one is not."""
        aged = await credential_repository.insert(make_credential(owner_id, "Bank", age_days=27))
        await credential_repository.insert(make_credential(owner_id, "Mail", age_days=10))

        candidates = await ExpiryScanner(credential_repository, default_policy).scan(now)

        assert [c.credential_id for c in candidates] == [aged.id]
        assert candidates[0].age_days == 27
        assert candidates[0].days_until_expiry == 3

    @pytest.mark.asyncio
    async def test_within_window_spans_to_threshold(
        self,
        credential_repository: InMemoryCredentialRepository,
        make_credential: Callable[..., Credential],
        owner_id: UUID,
        now: datetime,
    ) -> None:
        """WITHIN keeps notifying until the threshold is reached."""
        for age in (26, 27, 29, 30, 31):
            await credential_repository.insert(make_credential(owner_id, f"age-{age}", age_days=age))

        policy = FreshnessPolicy(window=ExpiryWindow.WITHIN)
        candidates = await ExpiryScanner(credential_repository, policy).scan(now)

        assert sorted(c.age_days for c in candidates) == [27, 29, 30]

    @pytest.mark.asyncio
    async def test_exact_window_single_day(
        self,
        credential_repository: InMemoryCredentialRepository,
        make_credential: Callable[..., Credential],
        owner_id: UUID,
        now: datetime,
    ) -> None:
        """EXACT only picks the first notice day."""
        for age in (26, 27, 28, 30):
            await credential_repository.insert(make_credential(owner_id, f"age-{age}", age_days=age))

        policy = FreshnessPolicy(window=ExpiryWindow.EXACT)
        candidates = await ExpiryScanner(credential_repository, policy).scan(now)

        assert [c.age_days for c in candidates] == [27]

    @pytest.mark.asyncio
    async def test_scans_every_owner_without_writing(
        self,
        credential_repository: InMemoryCredentialRepository,
        default_policy: FreshnessPolicy,
        make_credential: Callable[..., Credential],
        owner_id: UUID,
        other_owner_id: UUID,
        now: datetime,
    ) -> None:
        """The scan covers all owners and leaves the rows untouched."""
        mine = await credential_repository.insert(make_credential(owner_id, age_days=28))
        theirs = await credential_repository.insert(make_credential(other_owner_id, age_days=28))

        candidates = await ExpiryScanner(credential_repository, default_policy).scan(now)

        assert {c.owner_id for c in candidates} == {owner_id, other_owner_id}
        assert await credential_repository.get(owner_id, mine.id) == mine
        assert await credential_repository.get(other_owner_id, theirs.id) == theirs

    @pytest.mark.asyncio
    async def test_empty_store(
        self, credential_repository: InMemoryCredentialRepository, default_policy: FreshnessPolicy, now: datetime
    ) -> None:
        """An empty store yields no candidates."""
        assert await ExpiryScanner(credential_repository, default_policy).scan(now) == []
