"""
Booking job domain entity.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID, uuid4

from booking_engine.domain.exceptions.booking_error import InvalidTransitionError
from booking_engine.domain.exceptions.validation_error import ValidationFailedError
from booking_engine.domain.value_objects.job_attributes import (
    Certification,
    Gender,
    JobType,
)
from booking_engine.domain.value_objects.job_status import JobStatus

if TYPE_CHECKING:
    from booking_engine.domain.events.transition_outcome import TransitionOutcome


@dataclass
class Job:
    """Interpretation booking domain entity."""

    user_id: UUID
    from_language_id: int
    duration: int
    id: UUID = field(default_factory=uuid4)
    status: JobStatus = JobStatus.PENDING
    immediate: bool = False
    due: Optional[datetime] = None
    gender: Optional[Gender] = None
    certified: Certification = Certification.NONE
    customer_phone_type: bool = False
    customer_physical_type: bool = False
    town: Optional[str] = None
    job_type: JobType = JobType.UNPAID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    will_expire_at: Optional[datetime] = None
    admin_comments: Optional[str] = None
    flagged: bool = False
    manually_handled: bool = False
    by_admin: bool = False
    user_email: Optional[str] = None
    reference: Optional[str] = None
    session_time: Optional[str] = None
    end_at: Optional[datetime] = None
    withdraw_at: Optional[datetime] = None
    reopened_from_id: Optional[UUID] = None
    email_sent: bool = False
    cust_16_hour_email: bool = False
    cust_48_hour_email: bool = False

    def __post_init__(self):
        """Validate invariants and initialize timestamps."""
        if self.duration is None or self.duration <= 0:
            raise ValidationFailedError("Duration must be a positive number of minutes", "duration")
        if self.due is None and not self.immediate:
            raise ValidationFailedError("Due time is required for scheduled jobs", "due")
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)
        if not self.updated_at:
            self.updated_at = self.created_at

    def is_physical_only(self) -> bool:
        """Check if the customer only accepts an on-site interpreter."""
        return self.customer_physical_type and not self.customer_phone_type

    def is_phone_job(self) -> bool:
        """Phone-capable and mixed bookings are handled as phone bookings in messages."""
        return self.customer_phone_type or not self.customer_physical_type

    def time_until_due(self, now: datetime) -> timedelta:
        """Interval from now to the start of the session."""
        return self.due - now

    def is_in_future(self, now: datetime) -> bool:
        return self.due is not None and self.due > now

    def apply(self, outcome: "TransitionOutcome") -> None:
        """Apply a planned transition to this job."""
        if outcome.job_id != self.id:
            raise ValueError(f"Outcome for job {outcome.job_id} applied to job {self.id}")
        if self.status != outcome.old_status:
            raise InvalidTransitionError(
                self.status, outcome.new_status, "job changed since the transition was planned"
            )

        known = {f.name for f in fields(self)}
        for name, value in outcome.updates.items():
            if name not in known or name in ("id", "status"):
                raise ValueError(f"Unknown job field '{name}'")
            setattr(self, name, value)

        self.status = outcome.new_status
        self.updated_at = outcome.planned_at or self.updated_at

    def to_notification_data(self) -> Dict[str, Any]:
        """Job fields referenced by message templates."""
        return {
            "job_id": str(self.id),
            "from_language_id": self.from_language_id,
            "immediate": self.immediate,
            "due": self.due.isoformat() if self.due else None,
            "duration": self.duration,
            "town": self.town,
            "customer_phone_type": self.customer_phone_type,
            "customer_physical_type": self.customer_physical_type,
            "job_type": self.job_type.value,
        }
