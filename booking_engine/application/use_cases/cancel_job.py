"""Cancel booking use case."""

from dataclasses import dataclass
from uuid import UUID

from booking_engine.application.services.notification_dispatcher import DispatchReport
from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.validation_error import ValidationFailedError

logger = get_logger(__name__)


@dataclass
class CancelJobRequest:
    """Request to cancel a booking, by its customer or its translator."""

    job_id: UUID
    user_id: UUID


@dataclass
class CancelJobResult:
    """Result of a cancellation."""

    job: Job
    cancelled_by: str
    report: DispatchReport


class CancelJobUseCase(BookingUseCase):
    """
    Use case for cancelling a booking.

    Customers withdraw the booking (before/after the 24 hour window);
    translators hand it back to the pool, which is only allowed well ahead
    of the session.
    """

    async def execute(self, request: CancelJobRequest) -> CancelJobResult:
        now = self._now()
        job = await self._load_job(request.job_id)
        user = await self._load_user(request.user_id)

        if user.id == job.user_id:
            translator = await self.ledger.current_translator(job.id)
            outcome = self.state_machine.plan_customer_cancel(job, user, translator, now)
            cancelled_by = "customer"
        elif user.is_translator():
            assignment = await self.ledger.current(job.id)
            if assignment is None or assignment.translator_id != user.id:
                raise ValidationFailedError(
                    "Only the booked translator can cancel this booking", "user_id"
                )
            customer = await self._load_user(job.user_id, "Customer")
            outcome = self.state_machine.plan_translator_cancel(job, user, customer, now)
            cancelled_by = "translator"
        else:
            raise ValidationFailedError(
                "Only the booking's customer or translator can cancel it", "user_id"
            )

        report = await self._commit_transition(job, outcome, actor=user)

        logger.info(
            "Booking cancelled",
            job_id=str(job.id),
            cancelled_by=cancelled_by,
            status=job.status.value,
        )
        return CancelJobResult(job=job, cancelled_by=cancelled_by, report=report)
