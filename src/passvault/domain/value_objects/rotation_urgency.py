"""Rotation urgency value object."""

from collections.abc import Iterable
from enum import StrEnum
from typing import Self


class RotationUrgency(StrEnum):
    """How pressing a secret's rotation is under a freshness policy."""

    NONE = "none"
    NOTICE = "notice"
    DUE = "due"

    @property
    def rank(self) -> int:
        """Ordering key, higher is more pressing."""
        return list(RotationUrgency).index(self)

    @property
    def label(self) -> str:
        """Short wording for logs and message headers."""
        match self:
            case RotationUrgency.DUE:
                return "Rotation due"
            case RotationUrgency.NOTICE:
                return "Rotation due soon"
            case RotationUrgency.NONE:
                return "Up to date"

    @property
    def color_hex(self) -> str:
        """Header colour used in HTML notices."""
        match self:
            case RotationUrgency.DUE:
                return "#f8d7da"
            case RotationUrgency.NOTICE:
                return "#fff3cd"
            case RotationUrgency.NONE:
                return "#d1e7dd"

    @classmethod
    def most_pressing(cls, urgencies: Iterable[Self]) -> Self:
        """Highest urgency of ``urgencies``, NONE when empty."""
        return max(urgencies, key=lambda u: u.rank, default=cls.NONE)
