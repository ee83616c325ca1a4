"""Freshness policy value object."""

from dataclasses import dataclass
from enum import StrEnum, auto

from ..exceptions import InvalidPolicyError
from .rotation_urgency import RotationUrgency


class ExpiryWindow(StrEnum):
    """How the pre-expiry notice window selects credentials."""

    WITHIN = auto()
    EXACT = auto()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class FreshnessPolicy:
    """
    Age rules for stored secrets (in days).

    A secret is due for rotation once it has gone ``threshold_days`` without
    modification. Owners are warned during the last ``notice_days`` days:

    * ``WITHIN`` selects every age from ``threshold - notice`` up to and
      including ``threshold``.
    * ``EXACT`` selects only the age ``threshold - notice``.
    """

    threshold_days: int = 30
    notice_days: int = 3
    window: ExpiryWindow = ExpiryWindow.WITHIN

    def __post_init__(self) -> None:
        """Validate the notice window fits inside the threshold."""
        if not (0 <= self.notice_days < self.threshold_days):
            msg = (
                f"Policy must be: 0 <= notice({self.notice_days}) "
                f"< threshold({self.threshold_days})"
            )
            raise InvalidPolicyError(msg)

    @property
    def first_notice_age(self) -> int:
        """Age in days at which the first notice goes out."""
        return self.threshold_days - self.notice_days

    def days_until_expiry(self, age_days: int) -> int:
        """Days left before the threshold (negative once past it)."""
        return self.threshold_days - age_days

    def selects(self, age_days: int) -> bool:
        """Check whether a secret of the given age falls in the notice window."""
        if self.window is ExpiryWindow.EXACT:
            return age_days == self.first_notice_age
        return self.first_notice_age <= age_days <= self.threshold_days

    def urgency(self, age_days: int) -> RotationUrgency:
        """Classify a secret by age: due once past the threshold, notice inside the window."""
        if age_days >= self.threshold_days:
            return RotationUrgency.DUE
        if age_days >= self.first_notice_age:
            return RotationUrgency.NOTICE
        return RotationUrgency.NONE
