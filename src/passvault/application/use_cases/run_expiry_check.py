"""Use case for scanning aged secrets and notifying their owners."""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from ...domain.entities import EXPIRY_NOTICE, ExpiryCandidate, ExpiryReport, NotificationRecord
from ...domain.value_objects import ScanState
from ..clock import Clock, utc_now
from ..exceptions import StoreError
from ..ports import NotificationLog, OwnerDirectory
from ..services import DispatchResult, ExpiryScanner, NotificationDispatcher

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of the expiry check use case."""

    report: ExpiryReport
    dispatches: list[DispatchResult] = field(default_factory=list)
    dry_run: bool = False
    skipped_as_notified: int = 0

    @property
    def notifications_sent(self) -> int:
        """Owners whose notice was delivered."""
        return sum(1 for d in self.dispatches if d.delivered)

    @property
    def notifications_failed(self) -> int:
        """Owners whose notice could not be delivered."""
        return sum(1 for d in self.dispatches if not d.delivered)

    @property
    def success(self) -> bool:
        """Check if the operation was successful."""
        return self.notifications_failed == 0


class RunExpiryCheck:
    """
    One scan-and-notify cycle.

    Moves through ``IDLE -> SCANNING -> NOTIFY_BATCH -> IDLE``, skipping
    ``NOTIFY_BATCH`` when nothing qualifies. With a notification log attached,
    candidates already notified today are dropped and delivered ones are
    recorded; without it an owner is notified on every day a credential stays
    inside the window.
    """

    def __init__(
        self,
        scanner: ExpiryScanner,
        dispatcher: NotificationDispatcher,
        directory: OwnerDirectory,
        *,
        notification_log: NotificationLog | None = None,
        dry_run: bool = False,
        clock: Clock = utc_now,
    ) -> None:
        """
        Initialize the use case.

        Args:
            scanner: Selects candidates from the credential store.
            dispatcher: Sends one notice per owner.
            directory: Resolves owners to contact addresses.
            notification_log: Optional per-day record of sent notices.
            dry_run: If True, don't actually send notifications.
            clock: Time source used when no explicit time is given.
        """
        self._scanner = scanner
        self._dispatcher = dispatcher
        self._directory = directory
        self._log = notification_log
        self._dry_run = dry_run
        self._clock = clock
        self._state = ScanState.IDLE

    @property
    def state(self) -> ScanState:
        """Current position in the cycle."""
        return self._state

    async def execute(self, now: datetime | None = None) -> CheckResult:
        """
        Execute the expiry check use case.

        Args:
            now: Reference time; defaults to the clock.

        Returns:
            CheckResult containing the report and per-owner dispatch results.
        """
        now = now or self._clock()
        logger.info("Starting password expiry check...")

        try:
            self._state = ScanState.SCANNING
            candidates = await self._scanner.scan(now)
            candidates, skipped = await self._drop_already_notified(candidates, now)

            report = self._scanner.analyzer.analyze(candidates, now)
            logger.info("Analysis complete: %s", report.get_summary())

            if not report.requires_notification:
                logger.info("No passwords require notification")
                return CheckResult(report=report, dry_run=self._dry_run, skipped_as_notified=skipped)

            self._state = ScanState.NOTIFY_BATCH
            if self._dry_run:
                logger.info("DRY RUN: Would notify %d owners", report.owner_count)
                self._log_dry_run_report(report)
                return CheckResult(report=report, dry_run=True, skipped_as_notified=skipped)

            addresses = await self._directory.get_contact_addresses(report.owner_ids)
            dispatches = await self._dispatcher.dispatch_all(report, addresses)
            await self._record_delivered(dispatches, now)

            return CheckResult(
                report=report,
                dispatches=dispatches,
                dry_run=False,
                skipped_as_notified=skipped,
            )
        finally:
            self._state = ScanState.IDLE

    async def _drop_already_notified(
        self, candidates: list[ExpiryCandidate], now: datetime
    ) -> tuple[list[ExpiryCandidate], int]:
        """Filter out candidates the log says were notified today."""
        if self._log is None or not candidates:
            return candidates, 0

        already = await self._log.notified_on(now.date(), [c.credential_id for c in candidates])
        if already:
            logger.info("Skipping %d passwords already notified today", len(already))
        return [c for c in candidates if c.credential_id not in already], len(already)

    async def _record_delivered(self, dispatches: list[DispatchResult], now: datetime) -> None:
        """Log delivered notices so later runs today skip them."""
        if self._log is None:
            return

        records = [
            NotificationRecord(
                credential_id=c.credential_id,
                notified_on=now.date(),
                notification_type=EXPIRY_NOTICE,
            )
            for d in dispatches
            if d.delivered
            for c in d.candidates
        ]
        if not records:
            return
        try:
            await self._log.record(records)
        except StoreError:
            # The notices are already out; the next run may repeat them.
            logger.exception("Failed to record %d sent notices", len(records))

    def _log_dry_run_report(self, report: ExpiryReport) -> None:
        """Log report details in dry run mode."""
        logger.info("  Urgency: %s", report.urgency.label)
        logger.info("  Summary: %s", report.get_summary())
        logger.info("  Owners affected: %d", report.owner_count)
        logger.info("  Due today: %d", report.due_count)
