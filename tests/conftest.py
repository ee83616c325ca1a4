"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from passvault.application.services import CategoryResolver, CredentialStore
from passvault.domain.entities import Credential
from passvault.domain.value_objects import FreshnessPolicy
from passvault.infrastructure.adapters.memory import (
    InMemoryCategoryRepository,
    InMemoryCredentialRepository,
)
from passvault.infrastructure.crypto import CipherConfig, FernetCipher

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=UTC)


class FrozenClock:
    """Clock returning a fixed time until advanced."""

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def now() -> datetime:
    """Reference time shared by the fixtures."""
    return NOW


@pytest.fixture
def clock() -> FrozenClock:
    """Clock frozen at NOW."""
    return FrozenClock()


@pytest.fixture
def owner_id() -> UUID:
    """An owner."""
    return uuid4()


@pytest.fixture
def other_owner_id() -> UUID:
    """A second, unrelated owner."""
    return uuid4()


@pytest.fixture
def cipher() -> FernetCipher:
    """Cipher with a test key."""
    return FernetCipher(CipherConfig(key="test-encryption-key"))


@pytest.fixture
def default_policy() -> FreshnessPolicy:
    """30-day threshold, 3-day notice window."""
    return FreshnessPolicy()


@pytest.fixture
def category_repository() -> InMemoryCategoryRepository:
    """Empty category repository."""
    return InMemoryCategoryRepository()


@pytest.fixture
def credential_repository() -> InMemoryCredentialRepository:
    """Empty credential repository."""
    return InMemoryCredentialRepository()


@pytest.fixture
def resolver(
    category_repository: InMemoryCategoryRepository,
    credential_repository: InMemoryCredentialRepository,
    clock: FrozenClock,
) -> CategoryResolver:
    """Category resolver over the in-memory repositories."""
    return CategoryResolver(category_repository, credential_repository, clock=clock)


@pytest.fixture
def store(
    credential_repository: InMemoryCredentialRepository,
    resolver: CategoryResolver,
    cipher: FernetCipher,
    clock: FrozenClock,
) -> CredentialStore:
    """Credential store over the in-memory repositories."""
    return CredentialStore(credential_repository, resolver, cipher, clock=clock)


@pytest.fixture
def make_credential() -> Callable[..., Credential]:
    """Factory for credentials last modified a given number of days before NOW."""

    def _make(
        owner_id: UUID,
        title: str = "Mail",
        *,
        age_days: int = 0,
        category_id: UUID | None = None,
        ciphertext: str = "token",
    ) -> Credential:
        modified = NOW - timedelta(days=age_days)
        return Credential(
            id=uuid4(),
            owner_id=owner_id,
            category_id=category_id,
            title=title,
            username="user@example.com",
            secret_ciphertext=ciphertext,
            last_modified_at=modified,
            created_at=modified,
            updated_at=modified,
        )

    return _make


class RecordingTransport:
    """Notification transport that records messages and fails for chosen recipients."""

    def __init__(self, failing: dict[str, Exception] | None = None) -> None:
        self.failing = dict(failing or {})
        self.sent: list[dict[str, str | None]] = []

    def is_configured(self) -> bool:
        return True

    async def send(
        self, to_address: str, subject: str, body: str, *, html_body: str | None = None
    ) -> None:
        if to_address in self.failing:
            raise self.failing[to_address]
        self.sent.append(
            {"to": to_address, "subject": subject, "body": body, "html_body": html_body}
        )


@pytest.fixture
def transport() -> RecordingTransport:
    """Transport that delivers everything."""
    return RecordingTransport()
