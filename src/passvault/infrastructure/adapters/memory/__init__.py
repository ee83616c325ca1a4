"""In-memory store adapters."""

from .store import (
    InMemoryCategoryRepository,
    InMemoryCredentialRepository,
    InMemoryNotificationLog,
    StaticOwnerDirectory,
)

__all__ = [
    "InMemoryCategoryRepository",
    "InMemoryCredentialRepository",
    "InMemoryNotificationLog",
    "StaticOwnerDirectory",
]
