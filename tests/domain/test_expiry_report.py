"""Tests for ExpiryReport aggregate and ExpiryAnalyzer."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta
from uuid import UUID, uuid4

from passvault.domain.entities import Credential, ExpiryCandidate, ExpiryReport
from passvault.domain.services import ExpiryAnalyzer
from passvault.domain.value_objects import FreshnessPolicy, RotationUrgency


def _candidate(owner_id: UUID, title: str, days_left: int, now: datetime) -> ExpiryCandidate:
    age = 30 - days_left
    return ExpiryCandidate(
        credential_id=uuid4(),
        owner_id=owner_id,
        title=title,
        last_modified_at=now - timedelta(days=age),
        age_days=age,
        days_until_expiry=days_left,
    )


class TestExpiryReport:
    """Tests for ExpiryReport aggregate."""

    def test_empty_report(self, default_policy: FreshnessPolicy, now: datetime) -> None:
        """An empty report needs no notification."""
        report = ExpiryReport(candidates=[], policy=default_policy, generated_at=now)
        assert report.requires_notification is False
        assert report.urgency is RotationUrgency.NONE
        assert report.owner_count == 0
        assert report.get_summary() == "No passwords are due for rotation"

    def test_groups_by_owner_most_urgent_first(
        self, default_policy: FreshnessPolicy, now: datetime
    ) -> None:
        """Each owner's candidates are ordered by days left."""
        alice, bob = uuid4(), uuid4()
        report = ExpiryReport(
            candidates=[
                _candidate(alice, "Mail", 3, now),
                _candidate(bob, "Bank", 2, now),
                _candidate(alice, "Shop", 1, now),
            ],
            policy=default_policy,
            generated_at=now,
        )

        assert report.owner_count == 2
        assert set(report.owner_ids) == {alice, bob}
        assert [c.title for c in report.get_candidates_for_owner(alice)] == ["Shop", "Mail"]
        assert [c.title for c in report.get_candidates_for_owner(bob)] == ["Bank"]
        assert report.get_candidates_for_owner(uuid4()) == []

    def test_summary_and_urgency_with_due_candidates(
        self, default_policy: FreshnessPolicy, now: datetime
    ) -> None:
        """A candidate at the threshold makes the report due."""
        owner = uuid4()
        report = ExpiryReport(
            candidates=[_candidate(owner, "Mail", 0, now), _candidate(owner, "Bank", 3, now)],
            policy=default_policy,
            generated_at=now,
        )
        assert report.due_count == 1
        assert report.urgency is RotationUrgency.DUE
        assert report.get_summary() == (
            "2 passwords approaching expiry, 1 due today, 1 owners affected"
        )

    def test_notice_urgency_without_due(self, default_policy: FreshnessPolicy, now: datetime) -> None:
        """Candidates that still have days left leave the report at notice urgency."""
        report = ExpiryReport(
            candidates=[_candidate(uuid4(), "Mail", 3, now)],
            policy=default_policy,
            generated_at=now,
        )
        assert report.urgency is RotationUrgency.NOTICE
        assert report.requires_notification is True


class TestExpiryAnalyzer:
    """Tests for ExpiryAnalyzer domain service."""

    def test_select_filters_by_window(
        self,
        default_policy: FreshnessPolicy,
        make_credential: Callable[..., Credential],
        now: datetime,
    ) -> None:
        """Only credentials inside the notice window become candidates."""
        owner = uuid4()
        credentials = [
            make_credential(owner, "Old", age_days=27),
            make_credential(owner, "Fresh", age_days=10),
            make_credential(owner, "Stale", age_days=31),
            make_credential(owner, "Due", age_days=30),
        ]
        candidates = ExpiryAnalyzer(default_policy).select(credentials, now)
        assert [c.title for c in candidates] == ["Due", "Old"]
        assert [c.days_until_expiry for c in candidates] == [0, 3]

    def test_analyze_wraps_candidates(
        self,
        default_policy: FreshnessPolicy,
        make_credential: Callable[..., Credential],
        now: datetime,
    ) -> None:
        """The analyzer's report carries its policy and reference time."""
        analyzer = ExpiryAnalyzer(default_policy)
        candidates = analyzer.select([make_credential(uuid4(), age_days=28)], now)
        report = analyzer.analyze(candidates, now)
        assert report.policy is default_policy
        assert report.generated_at == now
        assert report.total_count == 1
