"""Domain value objects - Immutable objects defined by their attributes."""

from .activity_kind import ActivityKind
from .decrypted_secret import DecryptedSecret
from .freshness_policy import ExpiryWindow, FreshnessPolicy
from .rotation_urgency import RotationUrgency
from .scan_state import ScanState

__all__ = [
    "ActivityKind",
    "DecryptedSecret",
    "ExpiryWindow",
    "FreshnessPolicy",
    "RotationUrgency",
    "ScanState",
]
