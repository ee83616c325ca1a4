"""Credential CRUD with encryption and secret history."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.entities import Credential, CredentialFields
from ...domain.exceptions import NotFoundError
from ..clock import Clock, utc_now

if TYPE_CHECKING:
    from uuid import UUID

    from ..ports import CredentialRepository, SecretCipher
    from .category_resolver import CategoryResolver

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Owner-scoped create/read/update/delete of credentials.

    Plaintext secrets only exist on the way in (``fields.secret``) and on the
    way out (``reveal_secret``); everything persisted is ciphertext.
    """

    def __init__(
        self,
        repository: CredentialRepository,
        resolver: CategoryResolver,
        cipher: SecretCipher,
        *,
        clock: Clock = utc_now,
    ) -> None:
        """
        Initialize the store.

        Args:
            repository: Adapter persisting credential rows.
            resolver: Supplies a category when the caller gives none.
            cipher: Encrypts secrets before they reach the repository.
            clock: Time source for modification stamps.
        """
        self._repository = repository
        self._resolver = resolver
        self._cipher = cipher
        self._clock = clock

    async def create(self, owner_id: UUID, fields: CredentialFields) -> Credential:
        """Validate, categorize, encrypt and persist a new credential."""
        fields.validate(require_secret=True)
        category_id = await self._resolver.resolve_category_id(owner_id, fields.category_id)

        credential = Credential.new(
            owner_id=owner_id,
            category_id=category_id,
            fields=fields,
            secret_ciphertext=self._cipher.encrypt(fields.secret or ""),
            at=self._clock(),
        )
        created = await self._repository.insert(credential)
        logger.info("Created credential %s for owner %s", created.id, owner_id)
        return created

    async def get(self, credential_id: UUID, owner_id: UUID) -> Credential:
        """Fetch one of the owner's credentials."""
        credential = await self._repository.get(owner_id, credential_id)
        if credential is None:
            raise NotFoundError(f"Credential {credential_id} not found")
        return credential

    async def update(
        self, credential_id: UUID, owner_id: UUID, fields: CredentialFields
    ) -> Credential:
        """
        Apply an owner's edit to a credential.

        The editable fields are replaced as submitted; an omitted category
        falls back to Uncategorized. When a secret is supplied and its
        ciphertext differs from the stored one, the old ciphertext is
        prepended to the history. ``last_modified_at`` is refreshed on every
        update, secret change or not.

        Raises:
            NotFoundError: If the owner has no credential with this id.
            ValidationError: If a required field is blank.
        """
        fields.validate(require_secret=False)
        current = await self.get(credential_id, owner_id)
        category_id = await self._resolver.resolve_category_id(owner_id, fields.category_id)
        now = self._clock()

        updated = current.edited(fields, category_id=category_id, at=now)
        if fields.secret is not None:
            updated = updated.with_secret(self._encrypt_change(current, fields.secret), at=now)

        saved = await self._repository.update(updated)
        if saved is None:
            # Deleted between the read and the write.
            raise NotFoundError(f"Credential {credential_id} not found")

        if len(saved.history) > len(current.history):
            logger.info("Secret of credential %s changed", credential_id)
        return saved

    async def delete(self, credential_id: UUID, owner_id: UUID) -> None:
        """Delete a credential and its history; missing rows are ignored."""
        if await self._repository.delete(owner_id, credential_id):
            logger.info("Deleted credential %s for owner %s", credential_id, owner_id)
        else:
            logger.debug("Delete of credential %s matched nothing", credential_id)

    async def list_by_owner(
        self, owner_id: UUID, category_id: UUID | None = None
    ) -> list[Credential]:
        """List an owner's credentials by title, optionally for one category."""
        return await self._repository.list_by_owner(owner_id, category_id)

    def reveal_secret(self, credential: Credential) -> str:
        """Plaintext of the current secret, or the decryption placeholder."""
        return self._cipher.decrypt(credential.secret_ciphertext)

    def reveal_history(self, credential: Credential) -> list[str]:
        """Plaintexts of previous secrets, most recent first."""
        return [self._cipher.decrypt(entry.ciphertext) for entry in credential.history]

    def _encrypt_change(self, current: Credential, secret: str) -> str:
        # Tokens are randomized per encryption: an unchanged secret keeps its stored token.
        existing = self._cipher.try_decrypt(current.secret_ciphertext)
        if existing.ok and existing.value == secret:
            return current.secret_ciphertext
        return self._cipher.encrypt(secret)
