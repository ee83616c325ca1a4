"""Application settings loaded from environment variables."""

import os
from dataclasses import dataclass, field
from datetime import UTC, tzinfo
from functools import cached_property
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from croniter import croniter

from ...domain.exceptions import InvalidPolicyError
from ...domain.value_objects import ExpiryWindow, FreshnessPolicy
from ..adapters.notifications.email import EmailConfig
from ..adapters.notifications.graph_email import GraphEmailConfig
from ..adapters.notifications.resend import ResendConfig
from ..adapters.supabase.client import SupabaseConfig
from ..crypto.cipher import CipherConfig

STORE_BACKENDS = ("supabase", "memory")
RUN_MODES = ("once", "scheduled")


def _env_bool(key: str, default: bool = False) -> bool:
    """Get boolean from environment variable."""
    return os.environ.get(key, str(default)).lower() in ("true", "1", "yes")


def _env_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    return int(os.environ.get(key, str(default)))


def _env_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    return float(os.environ.get(key, str(default)))


def _env_str(key: str, default: str = "") -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


@dataclass
class Settings:
    """Application settings container."""

    # Encryption
    encryption_key: str = field(default_factory=lambda: _env_str("ENCRYPTION_KEY"), repr=False)

    # Store
    store_backend: str = field(default_factory=lambda: _env_str("STORE_BACKEND", "supabase"))
    supabase_url: str = field(default_factory=lambda: _env_str("SUPABASE_URL"))
    supabase_service_key: str = field(
        default_factory=lambda: _env_str("SUPABASE_SERVICE_KEY"), repr=False
    )
    store_timeout_seconds: float = field(default_factory=lambda: _env_float("STORE_TIMEOUT_SECONDS", 30.0))

    # Freshness policy
    freshness_threshold_days: int = field(default_factory=lambda: _env_int("FRESHNESS_THRESHOLD_DAYS", 30))
    expiry_notice_days: int = field(default_factory=lambda: _env_int("EXPIRY_NOTICE_DAYS", 3))
    expiry_window: str = field(default_factory=lambda: _env_str("EXPIRY_WINDOW", "within"))

    # Run configuration
    run_mode: str = field(default_factory=lambda: _env_str("RUN_MODE", "once"))
    cron_schedule: str = field(default_factory=lambda: _env_str("CRON_SCHEDULE", "0 9 * * *"))
    schedule_timezone: str = field(default_factory=lambda: _env_str("SCHEDULE_TIMEZONE", "UTC"))
    run_on_startup: bool = field(default_factory=lambda: _env_bool("RUN_ON_STARTUP"))
    log_level: str = field(default_factory=lambda: _env_str("LOG_LEVEL", "INFO"))
    dry_run: bool = field(default_factory=lambda: _env_bool("DRY_RUN"))

    # Notifications
    notification_dedup: bool = field(default_factory=lambda: _env_bool("NOTIFICATION_DEDUP"))
    notification_html: bool = field(default_factory=lambda: _env_bool("NOTIFICATION_HTML"))
    notify_timeout_seconds: float = field(default_factory=lambda: _env_float("NOTIFY_TIMEOUT_SECONDS", 30.0))

    # Email settings
    smtp_enabled: bool = field(default_factory=lambda: _env_bool("SMTP_ENABLED"))
    smtp_server: str = field(default_factory=lambda: _env_str("SMTP_SERVER"))
    smtp_port: int = field(default_factory=lambda: _env_int("SMTP_PORT", 587))
    smtp_username: str = field(default_factory=lambda: _env_str("SMTP_USERNAME"))
    smtp_password: str = field(default_factory=lambda: _env_str("SMTP_PASSWORD"), repr=False)
    smtp_from: str = field(default_factory=lambda: _env_str("SMTP_FROM"))
    smtp_use_tls: bool = field(default_factory=lambda: _env_bool("SMTP_USE_TLS", default=True))

    # Graph email settings (MS Graph API)
    graph_email_enabled: bool = field(default_factory=lambda: _env_bool("GRAPH_EMAIL_ENABLED"))
    graph_email_tenant_id: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_TENANT_ID"))
    graph_email_client_id: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_CLIENT_ID"))
    graph_email_client_secret: str = field(
        default_factory=lambda: _env_str("GRAPH_EMAIL_CLIENT_SECRET"), repr=False
    )
    graph_email_from: str = field(default_factory=lambda: _env_str("GRAPH_EMAIL_FROM"))
    graph_email_save_to_sent: bool = field(default_factory=lambda: _env_bool("GRAPH_EMAIL_SAVE_TO_SENT"))

    # Resend settings
    resend_enabled: bool = field(default_factory=lambda: _env_bool("RESEND_ENABLED"))
    resend_api_key: str = field(default_factory=lambda: _env_str("RESEND_API_KEY"), repr=False)
    resend_from: str = field(default_factory=lambda: _env_str("RESEND_FROM"))

    # API settings
    api_enabled: bool = field(default_factory=lambda: _env_bool("API_ENABLED"))
    api_host: str = field(default_factory=lambda: _env_str("API_HOST", "0.0.0.0"))  # noqa: S104
    api_port: int = field(default_factory=lambda: _env_int("API_PORT", 8080))

    def validate(self) -> None:
        """Validate required settings."""
        missing: list[str] = []

        if not self.encryption_key:
            missing.append("ENCRYPTION_KEY")
        if self.store_backend.lower() == "supabase":
            if not self.supabase_url:
                missing.append("SUPABASE_URL")
            if not self.supabase_service_key:
                missing.append("SUPABASE_SERVICE_KEY")

        if missing:
            msg = f"Missing required environment variables: {', '.join(missing)}"
            raise ValueError(msg)

        if self.store_backend.lower() not in STORE_BACKENDS:
            msg = f"Invalid STORE_BACKEND: {self.store_backend} (use {' or '.join(STORE_BACKENDS)})"
            raise ValueError(msg)

        if self.expiry_window.lower() not in {w.value for w in ExpiryWindow}:
            msg = f"Invalid EXPIRY_WINDOW: {self.expiry_window} (use 'within' or 'exact')"
            raise ValueError(msg)

        try:
            _ = self.policy
        except InvalidPolicyError as e:
            raise ValueError(str(e)) from e

        if not croniter.is_valid(self.cron_schedule):
            msg = f"Invalid CRON_SCHEDULE: {self.cron_schedule!r}"
            raise ValueError(msg)

        try:
            _ = self.timezone
        except ZoneInfoNotFoundError as e:
            msg = f"Unknown SCHEDULE_TIMEZONE: {self.schedule_timezone}"
            raise ValueError(msg) from e

    @cached_property
    def cipher_config(self) -> CipherConfig:
        """Get cipher key configuration."""
        return CipherConfig(key=self.encryption_key)

    @cached_property
    def supabase_config(self) -> SupabaseConfig:
        """Get Supabase client configuration."""
        return SupabaseConfig(
            url=self.supabase_url,
            service_key=self.supabase_service_key,
            timeout=self.store_timeout_seconds,
        )

    @cached_property
    def policy(self) -> FreshnessPolicy:
        """Get the freshness policy."""
        return FreshnessPolicy(
            threshold_days=self.freshness_threshold_days,
            notice_days=self.expiry_notice_days,
            window=ExpiryWindow(self.expiry_window.lower()),
        )

    @cached_property
    def timezone(self) -> tzinfo:
        """Get the zone the cron schedule is evaluated in."""
        if self.schedule_timezone.upper() == "UTC":
            return UTC
        return ZoneInfo(self.schedule_timezone)

    @cached_property
    def email_config(self) -> EmailConfig:
        """Get email configuration."""
        return EmailConfig(
            enabled=self.smtp_enabled,
            server=self.smtp_server,
            port=self.smtp_port,
            username=self.smtp_username,
            password=self.smtp_password,
            from_address=self.smtp_from,
            use_tls=self.smtp_use_tls,
            timeout=self.notify_timeout_seconds,
        )

    @cached_property
    def graph_email_config(self) -> GraphEmailConfig:
        """Get Graph email configuration."""
        return GraphEmailConfig(
            enabled=self.graph_email_enabled,
            tenant_id=self.graph_email_tenant_id,
            client_id=self.graph_email_client_id,
            client_secret=self.graph_email_client_secret,
            from_address=self.graph_email_from,
            save_to_sent_items=self.graph_email_save_to_sent,
            timeout=self.notify_timeout_seconds,
        )

    @cached_property
    def resend_config(self) -> ResendConfig:
        """Get Resend configuration."""
        return ResendConfig(
            enabled=self.resend_enabled,
            api_key=self.resend_api_key,
            from_address=self.resend_from,
            timeout=self.notify_timeout_seconds,
        )


def load_settings() -> Settings:
    """Load and validate settings from environment."""
    settings = Settings()
    settings.validate()
    return settings
