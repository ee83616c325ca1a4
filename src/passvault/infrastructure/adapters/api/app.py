"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import FastAPI, HTTPException, status
from fastapi.responses import JSONResponse

from ....application.exceptions import CheckInProgressError
from .models import (
    CheckResponse,
    ErrorResponse,
    HealthResponse,
    PolicyResponse,
    ReportResponse,
    StatisticsResponse,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Callable, Coroutine

    from ....application.use_cases.run_expiry_check import CheckResult
    from ....domain.entities import ExpiryReport

logger = logging.getLogger(__name__)


def _report_to_response(report: ExpiryReport) -> ReportResponse:
    """Convert domain report to API response (no credential details)."""
    return ReportResponse(
        generated_at=report.generated_at,
        urgency=report.urgency.value,
        summary=report.get_summary(),
        statistics=StatisticsResponse(
            owners_affected=report.owner_count,
            candidates=report.total_count,
            due_count=report.due_count,
        ),
        policy=PolicyResponse(
            threshold_days=report.policy.threshold_days,
            notice_days=report.policy.notice_days,
            window=str(report.policy.window),
        ),
        requires_notification=report.requires_notification,
    )


class ApiState:
    """Shared state for API endpoints."""

    def __init__(
        self,
        check_func: Callable[[], Coroutine[None, None, CheckResult]],
        last_result: Callable[[], CheckResult | None] | None = None,
        is_running: Callable[[], bool] | None = None,
        version: str = "1.0.0",
    ) -> None:
        """Initialize API state."""
        self.check_func = check_func
        self.version = version
        self._last_result = last_result
        self._is_running = is_running
        self.last_report: ExpiryReport | None = None

    @property
    def check_running(self) -> bool:
        """Whether an expiry check currently holds the run-lock."""
        return self._is_running() if self._is_running else False

    def latest_report(self) -> ExpiryReport | None:
        """Most recent report, whichever trigger produced it."""
        if self._last_result is not None:
            result = self._last_result()
            if result is not None:
                return result.report
        return self.last_report


def create_app(
    check_func: Callable[[], Coroutine[None, None, CheckResult]],
    *,
    last_result: Callable[[], CheckResult | None] | None = None,
    is_running: Callable[[], bool] | None = None,
    background: Callable[[], Coroutine[None, None, None]] | None = None,
    version: str = "1.0.0",
) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        check_func: Async function running one expiry check under the run-lock.
            Raises ``CheckInProgressError`` when a check is already running.
        last_result: Returns the latest check result from any trigger.
        is_running: Reports whether a check is in progress.
        background: Coroutine function started for the app's lifetime,
            e.g. the cron scheduler loop.
        version: Application version string.

    Returns:
        Configured FastAPI application.
    """
    state = ApiState(
        check_func=check_func,
        last_result=last_result,
        is_running=is_running,
        version=version,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        logger.info("API server starting...")
        task = asyncio.create_task(background()) if background is not None else None
        yield
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        logger.info("API server shutting down...")

    app = FastAPI(
        title="Password Vault Expiry API",
        description="Monitor stored passwords for rotation and notify their owners. "
        "This API provides health checks, summary reports, and on-demand expiry checks. "
        "**No credential details are exposed through this API.**",
        version=version,
        lifespan=lifespan,
        responses={
            500: {"model": ErrorResponse, "description": "Internal server error"},
        },
    )

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
        description="Check if the service is healthy and running.",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            version=state.version,
            timestamp=datetime.now(UTC),
            check_running=state.check_running,
        )

    @app.get(
        "/api/v1/report",
        response_model=ReportResponse,
        tags=["Reports"],
        summary="Get latest report",
        description="Get the latest expiry report summary. "
        "Does not include any credential details for security.",
        responses={
            404: {"model": ErrorResponse, "description": "No report available"},
        },
    )
    async def get_report() -> ReportResponse:
        report = state.latest_report()
        if report is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No report available. Trigger a check first using POST /api/v1/check",
            )
        return _report_to_response(report)

    @app.post(
        "/api/v1/check",
        response_model=CheckResponse,
        tags=["Operations"],
        summary="Trigger expiry check",
        description="Trigger an on-demand expiry check. "
        "This scans every stored password and optionally notifies owners.",
        responses={
            409: {"model": ErrorResponse, "description": "A check is already running"},
            500: {"model": ErrorResponse, "description": "Check failed"},
        },
    )
    async def trigger_check() -> CheckResponse:
        try:
            logger.info("API: Triggering expiry check...")
            result = await state.check_func()
        except CheckInProgressError as e:
            logger.warning("API: Expiry check already running")
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
        except Exception as e:
            logger.exception("API: Expiry check failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Expiry check failed: {e}",
            ) from e

        state.last_report = result.report

        return CheckResponse(
            success=result.success,
            message="Check completed successfully" if result.success else "Check completed with errors",
            report=_report_to_response(result.report),
            notifications_sent=result.notifications_sent,
            notifications_failed=result.notifications_failed,
            skipped_as_notified=result.skipped_as_notified,
            dry_run=result.dry_run,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc: Exception) -> JSONResponse:  # noqa: ARG001
        """Handle uncaught exceptions."""
        logger.exception("Unhandled exception in API")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error", "detail": str(exc)},
        )

    return app
