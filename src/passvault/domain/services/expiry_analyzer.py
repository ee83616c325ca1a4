"""Domain service for selecting credentials inside the notice window."""

from collections.abc import Iterable
from datetime import datetime

from ..entities import Credential, ExpiryCandidate, ExpiryReport
from ..value_objects import FreshnessPolicy


class ExpiryAnalyzer:
    """Domain service for analyzing credential ages."""

    def __init__(self, policy: FreshnessPolicy) -> None:
        """Initialize analyzer with the freshness policy."""
        self._policy = policy

    @property
    def policy(self) -> FreshnessPolicy:
        """The policy candidates are selected with."""
        return self._policy

    def select(self, credentials: Iterable[Credential], now: datetime) -> list[ExpiryCandidate]:
        """
        Select the credentials whose age falls in the notice window.

        Args:
            credentials: Credentials to inspect. They are not modified.
            now: Reference time for computing ages.

        Returns:
            Candidates ordered by owner, then most urgent first.
        """
        candidates = [
            ExpiryCandidate.from_credential(c, now=now, policy=self._policy)
            for c in credentials
            if self._policy.selects(c.age_days(now))
        ]
        return sorted(
            candidates,
            key=lambda c: (str(c.owner_id), c.days_until_expiry, c.title.casefold()),
        )

    def analyze(self, candidates: list[ExpiryCandidate], now: datetime) -> ExpiryReport:
        """Wrap selected candidates in a report."""
        return ExpiryReport(candidates=candidates, policy=self._policy, generated_at=now)
