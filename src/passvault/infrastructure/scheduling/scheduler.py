"""Daily cron trigger for the expiry check."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime, tzinfo
from typing import Generic, TypeVar

from croniter import croniter

from ...application.clock import Clock, utc_now
from ...application.exceptions import CheckInProgressError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExpiryScheduler(Generic[T]):
    """
    Run a job on every match of a cron expression.

    Runs are serialized by a run-lock: a trigger that arrives while a run is
    in progress is skipped. A failing run is logged and the schedule
    continues with the next match.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[T]],
        cron_expression: str,
        *,
        timezone: tzinfo = UTC,
        clock: Clock = utc_now,
        sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
        run_on_startup: bool = False,
    ) -> None:
        """
        Initialize the scheduler.

        Args:
            job: Coroutine function performing one check.
            cron_expression: Five-field cron expression, e.g. ``"0 9 * * *"``.
            timezone: Zone the cron expression is evaluated in.
            clock: Time source.
            sleep: Awaitable used to wait for the next fire time.
            run_on_startup: Run once before waiting for the first match.
        """
        if not croniter.is_valid(cron_expression):
            msg = f"Invalid cron expression: {cron_expression!r}"
            raise ValueError(msg)

        self._job = job
        self._cron_expression = cron_expression
        self._timezone = timezone
        self._clock = clock
        self._sleep = sleep
        self._run_on_startup = run_on_startup
        self._lock = asyncio.Lock()

    @property
    def cron_expression(self) -> str:
        """The configured cron expression."""
        return self._cron_expression

    @property
    def is_running(self) -> bool:
        """Whether a run currently holds the run-lock."""
        return self._lock.locked()

    def next_fire_time(self, after: datetime) -> datetime:
        """Next cron match strictly after ``after``, in UTC."""
        local = after.astimezone(self._timezone)
        next_run = croniter(self._cron_expression, local).get_next(datetime)

        # Handle timezone-naive datetime from croniter
        if next_run.tzinfo is None:
            next_run = next_run.replace(tzinfo=self._timezone)

        return next_run.astimezone(UTC)

    async def run_exclusive(self) -> T:
        """
        Run the job under the run-lock.

        Raises:
            CheckInProgressError: If another run holds the lock.
        """
        if self._lock.locked():
            msg = "An expiry check is already running"
            raise CheckInProgressError(msg)

        async with self._lock:
            return await self._job()

    async def trigger(self) -> T | None:
        """Run the job once, logging instead of raising on failure or overlap."""
        try:
            return await self.run_exclusive()
        except CheckInProgressError:
            logger.warning("Expiry check already running, skipping this trigger")
        except Exception:
            logger.exception("Scheduled expiry check failed")
        return None

    async def run_forever(self, max_runs: int | None = None) -> None:
        """
        Fire the job on every cron match.

        Args:
            max_runs: Stop after this many scheduled runs (unbounded if None).
        """
        logger.info("Starting scheduled mode with cron: %s", self._cron_expression)

        if self._run_on_startup:
            logger.info("Running initial check on startup...")
            await self.trigger()

        runs = 0
        last_fire: datetime | None = None
        while max_runs is None or runs < max_runs:
            now = self._clock()
            # A timer may wake slightly early; never re-fire the match just served
            after = now if last_fire is None else max(now, last_fire)
            next_run = self.next_fire_time(after)
            sleep_seconds = (next_run - now).total_seconds()

            if sleep_seconds > 0:
                logger.info("Next check scheduled for %s", next_run.isoformat())
                await self._sleep(sleep_seconds)

            last_fire = next_run
            logger.info("Running scheduled check...")
            await self.trigger()
            runs += 1
