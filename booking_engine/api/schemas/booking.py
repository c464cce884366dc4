"""
Booking API schemas.
"""

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from booking_engine.application.use_cases.get_user_jobs import UserJobsResult
from booking_engine.domain.entities.assignment import Assignment
from booking_engine.domain.entities.job import Job
from booking_engine.domain.events.change_record import ChangeRecord
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.domain.value_objects.notification_type import Channel

from .common import DispatchSummary, TimestampMixin


class BookingCreateRequest(BaseModel):
    """Booking creation request schema."""

    customer_id: UUID
    from_language_id: Optional[int] = Field(None, description="Language to interpret from")
    immediate: bool = False
    due: Optional[datetime] = Field(None, description="Session start; required unless immediate")
    duration: Optional[int] = Field(None, gt=0, description="Session length in minutes")
    job_for: List[str] = Field(
        default_factory=list,
        description="Gender and certification options, e.g. ['female', 'certified_in_law']",
    )
    customer_phone_type: bool = False
    customer_physical_type: bool = False
    town: Optional[str] = Field(None, max_length=100)
    user_email: Optional[str] = Field(None, max_length=255)
    reference: Optional[str] = Field(None, max_length=255)
    by_admin: bool = False

    @field_validator("due")
    @classmethod
    def validate_due(cls, v):
        return _as_utc(v)


class ActorRequest(BaseModel):
    """Request naming the user performing an action."""

    user_id: UUID


class AcceptRequest(BaseModel):
    translator_id: UUID


class ResendRequest(BaseModel):
    channel: Channel = Channel.PUSH

    @field_validator("channel")
    @classmethod
    def validate_channel(cls, v):
        if v == Channel.EMAIL:
            raise ValueError("Jobs are offered by push or SMS only")
        return v


class BookingUpdateRequest(BaseModel):
    """Administrative edit schema."""

    editor_id: UUID
    status: Optional[JobStatus] = None
    due: Optional[datetime] = None
    from_language_id: Optional[int] = None
    admin_comments: Optional[str] = None
    session_time: Optional[str] = Field(None, description="Session length as H:MM:SS")
    reference: Optional[str] = Field(None, max_length=255)
    translator_id: Optional[UUID] = None
    translator_email: Optional[str] = None
    flagged: Optional[bool] = Field(None, description="Flag the session; needs an admin comment")
    manually_handled: Optional[bool] = None

    @field_validator("due")
    @classmethod
    def validate_due(cls, v):
        return _as_utc(v)


class BookingResponse(TimestampMixin):
    """Booking response schema."""

    id: UUID
    user_id: UUID
    status: JobStatus
    from_language_id: int
    immediate: bool
    due: Optional[datetime] = None
    duration: int
    gender: Optional[str] = None
    certified: str
    job_type: str
    customer_phone_type: bool
    customer_physical_type: bool
    town: Optional[str] = None
    will_expire_at: Optional[datetime] = None
    session_time: Optional[str] = None
    end_at: Optional[datetime] = None
    withdraw_at: Optional[datetime] = None
    admin_comments: Optional[str] = None
    reference: Optional[str] = None
    reopened_from_id: Optional[UUID] = None
    flagged: bool = False
    manually_handled: bool = False

    @classmethod
    def from_entity(cls, job: Job) -> "BookingResponse":
        return cls(
            id=job.id,
            user_id=job.user_id,
            status=job.status,
            from_language_id=job.from_language_id,
            immediate=job.immediate,
            due=job.due,
            duration=job.duration,
            gender=job.gender.value if job.gender else None,
            certified=job.certified.value,
            job_type=job.job_type.value,
            customer_phone_type=job.customer_phone_type,
            customer_physical_type=job.customer_physical_type,
            town=job.town,
            will_expire_at=job.will_expire_at,
            session_time=job.session_time,
            end_at=job.end_at,
            withdraw_at=job.withdraw_at,
            admin_comments=job.admin_comments,
            reference=job.reference,
            flagged=job.flagged,
            manually_handled=job.manually_handled,
            reopened_from_id=job.reopened_from_id,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )


class BookingActionResponse(BaseModel):
    """Booking state after an action plus what was sent about it."""

    booking: BookingResponse
    notifications: DispatchSummary


class CreateBookingResponse(BookingActionResponse):
    notified_translators: int


class ReopenBookingResponse(BookingActionResponse):
    created_new: bool


class ChangeSchema(BaseModel):
    field: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None

    @classmethod
    def from_record(cls, record: ChangeRecord) -> "ChangeSchema":
        fields = record.as_log_fields()
        return cls(
            field=record.field,
            old_value=_text(fields["old_value"]),
            new_value=_text(fields["new_value"]),
        )


class UpdateBookingResponse(BookingActionResponse):
    changes: List[ChangeSchema]


class UserBookingsResponse(BaseModel):
    user_id: UUID
    user_role: str
    history: bool
    page: int
    per_page: int
    emergency_bookings: List[BookingResponse]
    normal_bookings: List[BookingResponse]

    @classmethod
    def from_result(cls, result: UserJobsResult) -> "UserBookingsResponse":
        return cls(
            user_id=result.user.id,
            user_role=result.user.role.value,
            history=result.history,
            page=result.page,
            per_page=result.per_page,
            emergency_bookings=[BookingResponse.from_entity(job) for job in result.emergency_jobs],
            normal_bookings=[BookingResponse.from_entity(job) for job in result.normal_jobs],
        )


class AssignmentResponse(BaseModel):
    id: UUID
    job_id: UUID
    translator_id: UUID
    created_at: datetime
    cancel_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[UUID] = None

    @classmethod
    def from_entity(cls, assignment: Assignment) -> "AssignmentResponse":
        return cls(
            id=assignment.id,
            job_id=assignment.job_id,
            translator_id=assignment.translator_id,
            created_at=assignment.created_at,
            cancel_at=assignment.cancel_at,
            completed_at=assignment.completed_at,
            completed_by=assignment.completed_by,
        )


class AcceptBookingResponse(BookingActionResponse):
    assignment: AssignmentResponse


class ResendResponse(BaseModel):
    recipients: int
    notifications: DispatchSummary


def _text(value) -> Optional[str]:
    return None if value is None else str(value)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps without an offset are taken as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
