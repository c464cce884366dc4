"""
Common API schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from booking_engine.application.services.notification_dispatcher import DispatchReport


class ErrorResponse(BaseModel):
    """Body returned by the exception handlers."""

    error: str
    message: str
    type: str
    field: Optional[str] = None


class TimestampMixin(BaseModel):
    """Mixin for timestamp fields."""

    created_at: datetime
    updated_at: datetime


class DispatchSummary(BaseModel):
    """Notification outcome of a request."""

    attempted: int = 0
    delivered: int = 0
    delayed: int = 0
    skipped: int = 0
    failed: int = 0

    @classmethod
    def from_report(cls, report: DispatchReport) -> "DispatchSummary":
        return cls(
            attempted=report.attempted,
            delivered=report.delivered,
            delayed=report.delayed,
            skipped=len(report.skipped),
            failed=len(report.failures),
        )
