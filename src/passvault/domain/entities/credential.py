"""Credential entity holding an encrypted secret and its history."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Self
from uuid import UUID, uuid4

from ..exceptions import ValidationError


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Ciphertext of a replaced secret and when it was replaced."""

    ciphertext: str
    changed_at: datetime


@dataclass(frozen=True, slots=True)
class CredentialFields:
    """Editable fields of a credential as submitted by its owner."""

    title: str
    username: str
    secret: str | None = None
    category_id: UUID | None = None
    website_url: str | None = None
    notes: str | None = None

    def validate(self, *, require_secret: bool) -> None:
        """Raise ValidationError when a required field is missing."""
        missing: list[str] = []
        if not self.title or not self.title.strip():
            missing.append("title")
        if not self.username or not self.username.strip():
            missing.append("username")
        # An omitted secret on update keeps the stored one; a blank one is an error.
        if (require_secret or self.secret is not None) and not self.secret:
            missing.append("secret")
        if missing:
            msg = f"Missing required fields: {', '.join(missing)}"
            raise ValidationError(msg)


@dataclass(frozen=True, slots=True)
class Credential:
    """
    A stored credential.

    ``history`` lists previous secret ciphertexts, most recent first. It only
    ever grows; entries are never edited or dropped while the credential
    exists.
    """

    id: UUID
    owner_id: UUID
    category_id: UUID | None
    title: str
    username: str
    secret_ciphertext: str
    website_url: str | None = None
    notes: str | None = None
    history: tuple[HistoryEntry, ...] = ()
    last_modified_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def age_days(self, now: datetime) -> int:
        """Whole days since the last modification."""
        return (ensure_utc(now) - ensure_utc(self.last_modified_at)).days

    def with_secret(self, ciphertext: str, *, at: datetime) -> Self:
        """
        Copy carrying ``ciphertext`` as the current secret.

        When it differs from the stored ciphertext the old one is prepended to
        the history. ``changed_at`` never goes back before the newest entry.
        """
        if ciphertext == self.secret_ciphertext:
            return self

        changed_at = at
        if self.history and self.history[0].changed_at > changed_at:
            changed_at = self.history[0].changed_at

        entry = HistoryEntry(ciphertext=self.secret_ciphertext, changed_at=changed_at)
        return replace(self, secret_ciphertext=ciphertext, history=(entry, *self.history))

    def edited(self, fields: CredentialFields, *, category_id: UUID, at: datetime) -> Self:
        """Copy with the editable fields replaced and the freshness clock reset."""
        return replace(
            self,
            category_id=category_id,
            title=fields.title.strip(),
            username=fields.username.strip(),
            website_url=fields.website_url or None,
            notes=fields.notes or None,
            last_modified_at=at,
            updated_at=at,
        )

    @classmethod
    def new(
        cls,
        *,
        owner_id: UUID,
        category_id: UUID,
        fields: CredentialFields,
        secret_ciphertext: str,
        at: datetime,
    ) -> Self:
        """Factory method for a credential that has not been persisted yet."""
        return cls(
            id=uuid4(),
            owner_id=owner_id,
            category_id=category_id,
            title=fields.title.strip(),
            username=fields.username.strip(),
            secret_ciphertext=secret_ciphertext,
            website_url=fields.website_url or None,
            notes=fields.notes or None,
            history=(),
            last_modified_at=at,
            created_at=at,
            updated_at=at,
        )
