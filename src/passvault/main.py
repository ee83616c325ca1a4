#!/usr/bin/env python3
"""
Password Vault Expiry Service

Composition root and application entry point.
Wires together all layers following hexagonal architecture principles.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from functools import cached_property
from typing import TYPE_CHECKING

from . import __version__
from .application.services import (
    ActivityReporter,
    CategoryResolver,
    CredentialStore,
    ExpiryScanner,
    NotificationDispatcher,
)
from .application.use_cases import CheckResult, RunExpiryCheck
from .infrastructure.adapters import (
    EmailNotificationTransport,
    GraphEmailNotificationTransport,
    InMemoryCategoryRepository,
    InMemoryCredentialRepository,
    InMemoryNotificationLog,
    ResendNotificationTransport,
    StaticOwnerDirectory,
    SupabaseCategoryRepository,
    SupabaseClient,
    SupabaseCredentialRepository,
    SupabaseNotificationLog,
    SupabaseOwnerDirectory,
)
from .infrastructure.config import Settings, load_settings
from .infrastructure.crypto import FernetCipher
from .infrastructure.scheduling import ExpiryScheduler

if TYPE_CHECKING:
    from .application.ports import (
        CategoryRepository,
        CredentialRepository,
        NotificationLog,
        NotificationTransport,
        OwnerDirectory,
    )

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


class ApplicationContainer:
    """
    Dependency injection container.

    Responsible for creating and wiring all application components.
    Store adapters are created once so every service shares them.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize container with settings."""
        self._settings = settings

    @property
    def uses_memory_store(self) -> bool:
        """Whether the in-memory backend is selected."""
        return self._settings.store_backend.lower() == "memory"

    @cached_property
    def supabase_client(self) -> SupabaseClient:
        """Shared Supabase client."""
        return SupabaseClient(self._settings.supabase_config)

    @cached_property
    def cipher(self) -> FernetCipher:
        """Secret cipher built from the configured key."""
        return FernetCipher(self._settings.cipher_config)

    @cached_property
    def category_repository(self) -> CategoryRepository:
        """Create the category repository adapter."""
        if self.uses_memory_store:
            return InMemoryCategoryRepository()
        return SupabaseCategoryRepository(self.supabase_client)

    @cached_property
    def credential_repository(self) -> CredentialRepository:
        """Create the credential repository adapter."""
        if self.uses_memory_store:
            return InMemoryCredentialRepository()
        return SupabaseCredentialRepository(self.supabase_client)

    @cached_property
    def owner_directory(self) -> OwnerDirectory:
        """Create the owner contact directory adapter."""
        if self.uses_memory_store:
            return StaticOwnerDirectory()
        return SupabaseOwnerDirectory(self.supabase_client)

    def create_notification_log(self) -> NotificationLog | None:
        """Create the dedup log, or None when dedup is disabled."""
        if not self._settings.notification_dedup:
            return None
        if self.uses_memory_store:
            return InMemoryNotificationLog()
        return SupabaseNotificationLog(self.supabase_client)

    def create_notification_transport(self) -> NotificationTransport:
        """Pick the first configured notification transport."""
        transports: list[NotificationTransport] = [
            EmailNotificationTransport(self._settings.email_config),
            GraphEmailNotificationTransport(self._settings.graph_email_config),
            ResendNotificationTransport(self._settings.resend_config),
        ]

        for transport in transports:
            if transport.is_configured():
                logger.info("Notification transport: %s", transport.__class__.__name__)
                return transport

        logger.warning("No notification transport configured; notices will fail to send")
        return transports[0]

    def create_category_resolver(self) -> CategoryResolver:
        """Create the category resolver."""
        return CategoryResolver(self.category_repository, self.credential_repository)

    def create_credential_store(self) -> CredentialStore:
        """Create the credential store service."""
        return CredentialStore(
            self.credential_repository,
            self.create_category_resolver(),
            self.cipher,
        )

    def create_activity_reporter(self) -> ActivityReporter:
        """Create the activity reporter."""
        return ActivityReporter(self.credential_repository)

    def create_check_use_case(self) -> RunExpiryCheck:
        """Create the main use case with all dependencies."""
        policy = self._settings.policy
        return RunExpiryCheck(
            scanner=ExpiryScanner(self.credential_repository, policy),
            dispatcher=NotificationDispatcher(
                self.create_notification_transport(),
                policy,
                include_html=self._settings.notification_html,
            ),
            directory=self.owner_directory,
            notification_log=self.create_notification_log(),
            dry_run=self._settings.dry_run,
        )


class Application:
    """
    Main application orchestrator.

    Handles run modes (single execution, scheduled, or API) and lifecycle.
    """

    def __init__(self, settings: Settings) -> None:
        """Initialize application with settings."""
        self._settings = settings
        self._container = ApplicationContainer(settings)
        self._use_case: RunExpiryCheck | None = None
        self._last_result: CheckResult | None = None
        self._scheduler = ExpiryScheduler(
            self.run_once,
            settings.cron_schedule,
            timezone=settings.timezone,
            run_on_startup=settings.run_on_startup,
        )

    @property
    def container(self) -> ApplicationContainer:
        """The wiring container."""
        return self._container

    @property
    def last_result(self) -> CheckResult | None:
        """Result of the most recent completed check."""
        return self._last_result

    async def run_once(self) -> CheckResult:
        """Execute a single expiry check."""
        if self._use_case is None:
            self._use_case = self._container.create_check_use_case()
        self._last_result = await self._use_case.execute()
        return self._last_result

    async def run_scheduled(self) -> None:
        """Run in scheduled mode with cron expression."""
        await self._scheduler.run_forever()

    async def run_api(self) -> None:
        """Run in API server mode."""
        import uvicorn

        from .infrastructure.adapters.api import create_app

        logger.info(
            "Starting API server on %s:%d",
            self._settings.api_host,
            self._settings.api_port,
        )

        scheduled = self._settings.run_mode.lower() == "scheduled"
        app = create_app(
            check_func=self._scheduler.run_exclusive,
            last_result=lambda: self._last_result,
            is_running=lambda: self._scheduler.is_running,
            background=self.run_scheduled if scheduled else None,
            version=__version__,
        )

        config = uvicorn.Config(
            app,
            host=self._settings.api_host,
            port=self._settings.api_port,
            log_level=self._settings.log_level.lower(),
        )
        await uvicorn.Server(config).serve()

    async def run(self) -> int:
        """
        Run the application based on configured mode.

        Returns:
            Exit code (0 for success, 1 for failure).
        """
        # API mode takes precedence if enabled
        if self._settings.api_enabled:
            await self.run_api()
            return 0

        match self._settings.run_mode.lower():
            case "once":
                logger.info("Running in single-execution mode")
                result = await self.run_once()
                return 0 if result.success else 1

            case "scheduled":
                await self.run_scheduled()
                return 0  # Never reached in scheduled mode

            case _:
                logger.error(
                    "Invalid RUN_MODE: %s (use 'once', 'scheduled', or set API_ENABLED=true)",
                    self._settings.run_mode,
                )
                return 1


async def async_main() -> int:
    """Async entry point."""
    try:
        logger.info("Password Vault Expiry Service starting...")

        settings = load_settings()
        logging.getLogger().setLevel(settings.log_level.upper())

        app = Application(settings)
        return await app.run()

    except ValueError as e:
        logger.error("Configuration error: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down...")
        return 0
    except Exception:
        logger.exception("Unexpected error")
        return 1


def main() -> None:
    """Main entry point."""
    exit_code = asyncio.run(async_main())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
