"""Tests for FreshnessPolicy value object."""

from __future__ import annotations

import pytest

from passvault.domain.exceptions import InvalidPolicyError
from passvault.domain.value_objects import ExpiryWindow, FreshnessPolicy, RotationUrgency


class TestFreshnessPolicy:
    """Tests for FreshnessPolicy value object."""

    def test_defaults(self, default_policy: FreshnessPolicy) -> None:
        """Default policy is a 30-day threshold with a 3-day notice window."""
        assert default_policy.threshold_days == 30
        assert default_policy.notice_days == 3
        assert default_policy.window is ExpiryWindow.WITHIN
        assert default_policy.first_notice_age == 27

    def test_days_until_expiry(self, default_policy: FreshnessPolicy) -> None:
        """Remaining days count down to zero at the threshold."""
        assert default_policy.days_until_expiry(27) == 3
        assert default_policy.days_until_expiry(30) == 0
        assert default_policy.days_until_expiry(31) == -1

    @pytest.mark.parametrize(
        ("age", "selected"),
        [(0, False), (26, False), (27, True), (28, True), (30, True), (31, False), (45, False)],
    )
    def test_within_window_boundaries(self, age: int, selected: bool) -> None:
        """WITHIN selects ages from threshold - notice through the threshold."""
        policy = FreshnessPolicy(window=ExpiryWindow.WITHIN)
        assert policy.selects(age) is selected

    @pytest.mark.parametrize(
        ("age", "selected"),
        [(26, False), (27, True), (28, False), (30, False), (31, False)],
    )
    def test_exact_window_boundaries(self, age: int, selected: bool) -> None:
        """EXACT selects only the first notice age."""
        policy = FreshnessPolicy(window=ExpiryWindow.EXACT)
        assert policy.selects(age) is selected

    def test_custom_values(self) -> None:
        """Custom thresholds move the window."""
        policy = FreshnessPolicy(threshold_days=90, notice_days=7)
        assert policy.selects(82) is False
        assert policy.selects(83) is True
        assert policy.selects(90) is True

    def test_notice_must_be_shorter_than_threshold(self) -> None:
        """A notice window as long as the threshold is rejected."""
        with pytest.raises(InvalidPolicyError, match="Policy must be"):
            FreshnessPolicy(threshold_days=3, notice_days=3)

    def test_negative_notice_rejected(self) -> None:
        """Negative notice days are rejected."""
        with pytest.raises(InvalidPolicyError):
            FreshnessPolicy(notice_days=-1)

    def test_window_parses_from_string(self) -> None:
        """Window values match their configuration strings."""
        assert ExpiryWindow("within") is ExpiryWindow.WITHIN
        assert ExpiryWindow("exact") is ExpiryWindow.EXACT
        assert str(ExpiryWindow.EXACT) == "exact"

    def test_policy_is_frozen(self, default_policy: FreshnessPolicy) -> None:
        """Policy should be immutable."""
        with pytest.raises(AttributeError):
            default_policy.threshold_days = 10  # type: ignore[misc]


class TestRotationUrgency:
    """Tests for classifying secrets by rotation urgency."""

    @pytest.mark.parametrize(
        ("age", "urgency"),
        [
            (0, RotationUrgency.NONE),
            (26, RotationUrgency.NONE),
            (27, RotationUrgency.NOTICE),
            (29, RotationUrgency.NOTICE),
            (30, RotationUrgency.DUE),
            (45, RotationUrgency.DUE),
        ],
    )
    def test_urgency_by_age(
        self, default_policy: FreshnessPolicy, age: int, urgency: RotationUrgency
    ) -> None:
        """Notice starts with the window and due starts at the threshold."""
        assert default_policy.urgency(age) is urgency

    def test_urgency_follows_custom_policy(self) -> None:
        """A longer notice window starts the notice earlier."""
        policy = FreshnessPolicy(threshold_days=90, notice_days=14)
        assert policy.urgency(75) is RotationUrgency.NONE
        assert policy.urgency(76) is RotationUrgency.NOTICE
        assert policy.urgency(90) is RotationUrgency.DUE

    def test_most_pressing(self) -> None:
        """The highest urgency wins and an empty set is none."""
        assert RotationUrgency.most_pressing([]) is RotationUrgency.NONE
        assert (
            RotationUrgency.most_pressing([RotationUrgency.NOTICE, RotationUrgency.DUE])
            is RotationUrgency.DUE
        )
