"""API response models (no credential details exposed)."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Health check response."""

    status: Literal["healthy", "unhealthy"]
    version: str
    timestamp: datetime
    check_running: bool = Field(default=False, description="An expiry check is in progress")


class PolicyResponse(BaseModel):
    """Configured freshness policy."""

    threshold_days: int
    notice_days: int
    window: str = Field(description="Notice window mode: within or exact")


class StatisticsResponse(BaseModel):
    """Candidate statistics (no details)."""

    owners_affected: int = Field(description="Owners with at least one candidate")
    candidates: int = Field(description="Passwords inside the notice window")
    due_count: int = Field(description="Passwords that reached the freshness threshold")


class ReportResponse(BaseModel):
    """Expiry report summary (no credential details)."""

    generated_at: datetime
    urgency: str = Field(description="Most pressing rotation urgency: due, notice, or none")
    summary: str = Field(description="Human-readable summary")
    statistics: StatisticsResponse
    policy: PolicyResponse
    requires_notification: bool


class CheckResponse(BaseModel):
    """Response from triggering a check."""

    success: bool
    message: str
    report: ReportResponse | None = None
    notifications_sent: int = 0
    notifications_failed: int = 0
    skipped_as_notified: int = 0
    dry_run: bool = False


class ErrorResponse(BaseModel):
    """Error response."""

    error: str
    detail: str | None = None
