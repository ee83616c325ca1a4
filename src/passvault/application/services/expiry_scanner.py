"""Read-only scan for credentials approaching the freshness threshold."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ...domain.services import ExpiryAnalyzer

if TYPE_CHECKING:
    from datetime import datetime

    from ...domain.entities import ExpiryCandidate
    from ...domain.value_objects import FreshnessPolicy
    from ..ports import CredentialRepository

logger = logging.getLogger(__name__)


class ExpiryScanner:
    """Selects credentials whose age falls inside the notice window."""

    def __init__(self, repository: CredentialRepository, policy: FreshnessPolicy) -> None:
        self._repository = repository
        self._analyzer = ExpiryAnalyzer(policy)

    @property
    def analyzer(self) -> ExpiryAnalyzer:
        """Domain service applying the freshness policy."""
        return self._analyzer

    async def scan(self, now: datetime) -> list[ExpiryCandidate]:
        """
        Scan every stored credential.

        Never writes to the repository.

        Args:
            now: Reference time for computing ages.

        Returns:
            Candidates ordered by owner, then most urgent first.
        """
        credentials = await self._repository.list_all()
        candidates = self._analyzer.select(credentials, now)
        logger.info(
            "Scanned %d credentials, %d inside the notice window (%s)",
            len(credentials),
            len(candidates),
            self._analyzer.policy.window,
        )
        return candidates
