"""Tests for the composition root."""

from __future__ import annotations

from uuid import uuid4

import pytest

from passvault.domain.entities import CredentialFields
from passvault.infrastructure.adapters import (
    EmailNotificationTransport,
    InMemoryCredentialRepository,
    ResendNotificationTransport,
)
from passvault.infrastructure.config import Settings
from passvault.main import Application, ApplicationContainer


def _settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "encryption_key": "key",
        "store_backend": "memory",
        "smtp_enabled": False,
        "graph_email_enabled": False,
        "resend_enabled": False,
        "notification_dedup": False,
        "dry_run": False,
    }
    values.update(overrides)
    return Settings(**values)  # type: ignore[arg-type]


class TestApplicationContainer:
    """Tests for ApplicationContainer wiring."""

    def test_memory_backend_shares_repositories(self) -> None:
        """Every service sees the same in-memory store."""
        container = ApplicationContainer(_settings())
        assert isinstance(container.credential_repository, InMemoryCredentialRepository)
        assert container.credential_repository is container.credential_repository

    def test_first_configured_transport_selected(self) -> None:
        """Resend is picked when it is the only configured transport."""
        container = ApplicationContainer(
            _settings(resend_enabled=True, resend_api_key="re_key", resend_from="vault@example.com")
        )
        assert isinstance(container.create_notification_transport(), ResendNotificationTransport)

    def test_unconfigured_falls_back_to_email(self) -> None:
        """Without any configured transport the SMTP one is used and will fail per owner."""
        container = ApplicationContainer(_settings())
        assert isinstance(container.create_notification_transport(), EmailNotificationTransport)

    def test_dedup_log_optional(self) -> None:
        """The notification log only exists when dedup is enabled."""
        assert ApplicationContainer(_settings()).create_notification_log() is None
        assert ApplicationContainer(_settings(notification_dedup=True)).create_notification_log()


class TestApplication:
    """Tests for Application run modes."""

    @pytest.mark.asyncio
    async def test_run_once_on_empty_vault(self) -> None:
        """A check over an empty vault succeeds and is remembered."""
        app = Application(_settings())

        result = await app.run_once()

        assert result.success is True
        assert app.last_result is result

    @pytest.mark.asyncio
    async def test_store_and_check_share_data(self) -> None:
        """Credentials written through the store are visible to the check."""
        app = Application(_settings(dry_run=True))
        store = app.container.create_credential_store()
        owner = uuid4()
        await store.create(owner, CredentialFields(title="Mail", username="me", secret="alpha"))

        assert len(await store.list_by_owner(owner)) == 1
        assert (await app.run_once()).report.total_count == 0

    @pytest.mark.asyncio
    async def test_invalid_run_mode(self) -> None:
        """Unknown run modes exit with an error code."""
        assert await Application(_settings(run_mode="sometimes")).run() == 1
