"""Infrastructure adapters - Implementations of application ports."""

from .memory import (
    InMemoryCategoryRepository,
    InMemoryCredentialRepository,
    InMemoryNotificationLog,
    StaticOwnerDirectory,
)
from .notifications import (
    EmailNotificationTransport,
    GraphEmailNotificationTransport,
    ResendNotificationTransport,
)
from .supabase import (
    SupabaseCategoryRepository,
    SupabaseClient,
    SupabaseCredentialRepository,
    SupabaseNotificationLog,
    SupabaseOwnerDirectory,
)

__all__ = [
    "EmailNotificationTransport",
    "GraphEmailNotificationTransport",
    "InMemoryCategoryRepository",
    "InMemoryCredentialRepository",
    "InMemoryNotificationLog",
    "ResendNotificationTransport",
    "StaticOwnerDirectory",
    "SupabaseCategoryRepository",
    "SupabaseClient",
    "SupabaseCredentialRepository",
    "SupabaseNotificationLog",
    "SupabaseOwnerDirectory",
]
