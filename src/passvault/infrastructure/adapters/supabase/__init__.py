"""Supabase store adapters."""

from .client import SupabaseClient, SupabaseConfig
from .directory import SupabaseOwnerDirectory
from .repository import (
    SupabaseCategoryRepository,
    SupabaseCredentialRepository,
    SupabaseNotificationLog,
)

__all__ = [
    "SupabaseCategoryRepository",
    "SupabaseClient",
    "SupabaseConfig",
    "SupabaseCredentialRepository",
    "SupabaseNotificationLog",
    "SupabaseOwnerDirectory",
]
