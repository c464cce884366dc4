"""Create booking use case."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional
from uuid import UUID

from booking_engine.application.services.expiry_calculator import will_expire_at
from booking_engine.application.services.notification_dispatcher import DispatchReport
from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.validation_error import (
    RequiredFieldError,
    ValidationFailedError,
)
from booking_engine.domain.value_objects.job_attributes import (
    JobType,
    certification_from_job_for,
    gender_from_job_for,
)
from booking_engine.infrastructure.monitoring.metrics import record_job_creation

logger = get_logger(__name__)


@dataclass
class CreateJobRequest:
    """Request for creating a booking."""

    customer_id: UUID
    from_language_id: Optional[int]
    immediate: bool
    duration: Optional[int]
    due: Optional[datetime] = None
    job_for: List[str] = field(default_factory=list)
    customer_phone_type: bool = False
    customer_physical_type: bool = False
    town: Optional[str] = None
    user_email: Optional[str] = None
    reference: Optional[str] = None
    by_admin: bool = False


@dataclass
class CreateJobResult:
    """Result of booking creation."""

    job: Job
    notified_translators: int
    report: DispatchReport


class CreateJobUseCase(BookingUseCase):
    """Use case for creating a booking and offering it to suitable translators."""

    def __init__(self, *args, immediate_lead_minutes: int = 5, **kwargs):
        super().__init__(*args, **kwargs)
        self.immediate_lead = timedelta(minutes=immediate_lead_minutes)

    async def execute(self, request: CreateJobRequest) -> CreateJobResult:
        """Validate the request, store the job and push it to matching translators."""
        now = self._now()
        customer = await self._load_user(request.customer_id, "Customer")
        if not customer.is_customer():
            raise ValidationFailedError("Only customers can create bookings", "customer_id")

        # 1. Required fields
        if not request.from_language_id:
            raise RequiredFieldError("from_language_id")
        if not request.duration:
            raise RequiredFieldError("duration")

        phone = request.customer_phone_type
        physical = request.customer_physical_type
        if request.immediate:
            due = now + self.immediate_lead
            phone = True
        else:
            if request.due is None:
                raise RequiredFieldError("due")
            if request.due <= now:
                raise ValidationFailedError("A booking cannot be created in the past", "due")
            if not phone and not physical:
                raise ValidationFailedError(
                    "Choose phone and/or on-site interpretation", "customer_phone_type"
                )
            due = request.due

        # 2. Build the job
        job = Job(
            user_id=customer.id,
            from_language_id=request.from_language_id,
            duration=request.duration,
            immediate=request.immediate,
            due=due,
            gender=gender_from_job_for(request.job_for),
            certified=certification_from_job_for(request.job_for),
            customer_phone_type=phone,
            customer_physical_type=physical,
            town=request.town or customer.town,
            job_type=JobType.from_consumer_type(customer.consumer_type),
            created_at=now,
            will_expire_at=will_expire_at(due, now),
            user_email=request.user_email,
            reference=request.reference,
            by_admin=request.by_admin,
        )

        # 3. Persist
        created_job = await self.transaction.execute_in_transaction(
            lambda: self.job_repo.create(job)
        )
        record_job_creation(created_job.job_type.value, created_job.immediate)

        logger.info(
            "Booking created",
            job_id=str(created_job.id),
            customer_id=str(customer.id),
            immediate=created_job.immediate,
            due=created_job.due.isoformat(),
            will_expire_at=created_job.will_expire_at.isoformat(),
            job_type=created_job.job_type.value,
            certified=created_job.certified.value,
        )

        # 4. Confirm to the customer and offer to suitable translators
        offers = await self._suitable_translator_intents(created_job)
        intents = self.state_machine.booking_received_intents(created_job, customer) + offers
        report = await self.dispatcher.dispatch(intents)
        notified = sum(len(intent.recipients) for intent in offers)

        return CreateJobResult(job=created_job, notified_translators=notified, report=report)
