"""Tests for CredentialStore service."""

from __future__ import annotations

from dataclasses import replace
from uuid import UUID, uuid4

import pytest

from passvault.application.services import CategoryResolver, CredentialStore
from passvault.domain.entities import CredentialFields
from passvault.domain.exceptions import NotFoundError, ValidationError
from passvault.domain.value_objects import DecryptedSecret
from passvault.infrastructure.adapters.memory import InMemoryCredentialRepository


def _fields(secret: str | None = "alpha", **overrides: object) -> CredentialFields:
    values: dict[str, object] = {"title": "Mail", "username": "me@example.com", "secret": secret}
    values.update(overrides)
    return CredentialFields(**values)  # type: ignore[arg-type]


class TestCreate:
    """Tests for creating credentials."""

    @pytest.mark.asyncio
    async def test_create_encrypts_and_defaults_category(
        self, store: CredentialStore, resolver: CategoryResolver, owner_id: UUID
    ) -> None:
        """A credential without a category lands in Uncategorized, encrypted."""
        credential = await store.create(owner_id, _fields())

        default = await resolver.ensure_default_category(owner_id)
        assert credential.category_id == default.id
        assert credential.secret_ciphertext != "alpha"
        assert credential.history == ()
        assert store.reveal_secret(credential) == "alpha"

    @pytest.mark.asyncio
    async def test_create_keeps_requested_category(
        self, store: CredentialStore, resolver: CategoryResolver, owner_id: UUID
    ) -> None:
        """An explicit category is kept."""
        work = await resolver.create_category(owner_id, "Work")
        credential = await store.create(owner_id, _fields(category_id=work.id))
        assert credential.category_id == work.id

    @pytest.mark.asyncio
    async def test_create_rejects_foreign_category(
        self,
        store: CredentialStore,
        resolver: CategoryResolver,
        credential_repository: InMemoryCredentialRepository,
        owner_id: UUID,
        other_owner_id: UUID,
    ) -> None:
        """A credential cannot be filed under another owner's category."""
        banking = await resolver.create_category(other_owner_id, "Banking")

        with pytest.raises(NotFoundError):
            await store.create(owner_id, _fields(category_id=banking.id))
        assert await credential_repository.list_by_owner(owner_id) == []

    @pytest.mark.asyncio
    async def test_create_requires_secret(self, store: CredentialStore, owner_id: UUID) -> None:
        """Creating without a secret is refused."""
        with pytest.raises(ValidationError, match="secret"):
            await store.create(owner_id, _fields(secret=None))

    @pytest.mark.asyncio
    async def test_create_requires_title(
        self,
        store: CredentialStore,
        credential_repository: InMemoryCredentialRepository,
        owner_id: UUID,
    ) -> None:
        """Nothing is stored when validation fails."""
        with pytest.raises(ValidationError, match="title"):
            await store.create(owner_id, _fields(title=""))
        assert await credential_repository.list_all() == []


class TestUpdate:
    """Tests for updating credentials."""

    @pytest.mark.asyncio
    async def test_secret_change_records_history(
        self, store: CredentialStore, owner_id: UUID, clock
    ) -> None:
        """Replacing alpha with beta keeps alpha as the only previous secret."""
        created = await store.create(owner_id, _fields("alpha"))
        changed_at = clock.advance(days=5)

        updated = await store.update(created.id, owner_id, _fields("beta"))

        assert store.reveal_secret(updated) == "beta"
        assert store.reveal_history(updated) == ["alpha"]
        assert updated.history[0].ciphertext == created.secret_ciphertext
        assert updated.history[0].changed_at == changed_at
        assert updated.last_modified_at == changed_at

    @pytest.mark.asyncio
    async def test_history_most_recent_first(self, store: CredentialStore, owner_id: UUID, clock) -> None:
        """Each change is prepended."""
        credential = await store.create(owner_id, _fields("alpha"))
        clock.advance(days=1)
        credential = await store.update(credential.id, owner_id, _fields("beta"))
        clock.advance(days=1)
        credential = await store.update(credential.id, owner_id, _fields("gamma"))

        assert store.reveal_secret(credential) == "gamma"
        assert store.reveal_history(credential) == ["beta", "alpha"]

    @pytest.mark.asyncio
    async def test_title_only_update_keeps_history(
        self, store: CredentialStore, owner_id: UUID, clock
    ) -> None:
        """An edit without a secret leaves history alone but resets freshness."""
        created = await store.create(owner_id, _fields("alpha"))
        edited_at = clock.advance(days=20)

        updated = await store.update(created.id, owner_id, _fields(None, title="Webmail"))

        assert updated.title == "Webmail"
        assert updated.history == ()
        assert updated.secret_ciphertext == created.secret_ciphertext
        assert updated.last_modified_at == edited_at

    @pytest.mark.asyncio
    async def test_same_secret_resubmitted_keeps_history(
        self, store: CredentialStore, owner_id: UUID, clock
    ) -> None:
        """Submitting the stored secret again is not a change."""
        created = await store.create(owner_id, _fields("alpha"))
        clock.advance(days=1)

        updated = await store.update(created.id, owner_id, _fields("alpha", notes="rotated?"))

        assert updated.history == ()
        assert updated.secret_ciphertext == created.secret_ciphertext
        assert updated.notes == "rotated?"

    @pytest.mark.asyncio
    async def test_omitted_category_falls_back_to_uncategorized(
        self, store: CredentialStore, resolver: CategoryResolver, owner_id: UUID
    ) -> None:
        """The edit form replaces the category as submitted."""
        work = await resolver.create_category(owner_id, "Work")
        created = await store.create(owner_id, _fields(category_id=work.id))

        updated = await store.update(created.id, owner_id, _fields(None))

        default = await resolver.ensure_default_category(owner_id)
        assert updated.category_id == default.id

    @pytest.mark.asyncio
    async def test_update_validates(self, store: CredentialStore, owner_id: UUID) -> None:
        """Blank required fields are refused."""
        created = await store.create(owner_id, _fields())
        with pytest.raises(ValidationError, match="username"):
            await store.update(created.id, owner_id, _fields(None, username=" "))

    @pytest.mark.asyncio
    async def test_update_foreign_credential_not_found(
        self, store: CredentialStore, owner_id: UUID, other_owner_id: UUID
    ) -> None:
        """Another owner's credential cannot be edited."""
        created = await store.create(owner_id, _fields())
        with pytest.raises(NotFoundError):
            await store.update(created.id, other_owner_id, _fields("stolen"))

        assert store.reveal_secret(await store.get(created.id, owner_id)) == "alpha"


class TestReadAndDelete:
    """Tests for reading, listing and deleting credentials."""

    @pytest.mark.asyncio
    async def test_get_missing_raises(self, store: CredentialStore, owner_id: UUID) -> None:
        """Unknown ids are reported as not found."""
        with pytest.raises(NotFoundError):
            await store.get(uuid4(), owner_id)

    @pytest.mark.asyncio
    async def test_list_by_owner_sorted_and_scoped(
        self, store: CredentialStore, owner_id: UUID, other_owner_id: UUID
    ) -> None:
        """Listing only returns the owner's credentials, by title."""
        await store.create(owner_id, _fields(title="zeta"))
        await store.create(owner_id, _fields(title="Alpha"))
        await store.create(other_owner_id, _fields(title="Beta"))

        titles = [c.title for c in await store.list_by_owner(owner_id)]
        assert titles == ["Alpha", "zeta"]

    @pytest.mark.asyncio
    async def test_list_by_category(
        self, store: CredentialStore, resolver: CategoryResolver, owner_id: UUID
    ) -> None:
        """Listing can be narrowed to one category."""
        work = await resolver.create_category(owner_id, "Work")
        await store.create(owner_id, _fields(title="VPN", category_id=work.id))
        await store.create(owner_id, _fields(title="Mail"))

        titles = [c.title for c in await store.list_by_owner(owner_id, work.id)]
        assert titles == ["VPN"]

    @pytest.mark.asyncio
    async def test_delete_removes_from_listing(self, store: CredentialStore, owner_id: UUID) -> None:
        """A deleted credential no longer appears."""
        created = await store.create(owner_id, _fields())
        await store.delete(created.id, owner_id)

        assert await store.list_by_owner(owner_id) == []
        with pytest.raises(NotFoundError):
            await store.get(created.id, owner_id)

    @pytest.mark.asyncio
    async def test_delete_missing_is_silent(self, store: CredentialStore, owner_id: UUID) -> None:
        """Deleting nothing is not an error."""
        await store.delete(uuid4(), owner_id)

    @pytest.mark.asyncio
    async def test_delete_foreign_credential_ignored(
        self, store: CredentialStore, owner_id: UUID, other_owner_id: UUID
    ) -> None:
        """Another owner cannot delete the credential."""
        created = await store.create(owner_id, _fields())
        await store.delete(created.id, other_owner_id)
        assert len(await store.list_by_owner(owner_id)) == 1

    @pytest.mark.asyncio
    async def test_reveal_undecryptable_shows_placeholder(
        self, store: CredentialStore, owner_id: UUID
    ) -> None:
        """A corrupted ciphertext reveals the placeholder instead of failing."""
        created = await store.create(owner_id, _fields())
        broken = replace(created, secret_ciphertext="not-a-token")
        assert store.reveal_secret(broken) == DecryptedSecret.PLACEHOLDER
