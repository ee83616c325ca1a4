"""Expiry scan state value object."""

from enum import StrEnum, auto


class ScanState(StrEnum):
    """Lifecycle of one expiry check cycle."""

    IDLE = auto()
    SCANNING = auto()
    NOTIFY_BATCH = auto()

    def __str__(self) -> str:
        return self.value
