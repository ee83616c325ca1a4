"""Activity kind value object."""

from enum import StrEnum, auto


class ActivityKind(StrEnum):
    """Whether an activity entry is the live secret or a replaced one."""

    CURRENT = auto()
    PREVIOUS = auto()

    def __str__(self) -> str:
        return self.value

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        match self:
            case ActivityKind.CURRENT:
                return "Current Password"
            case ActivityKind.PREVIOUS:
                return "Previous Password"
