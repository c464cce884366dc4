"""Customer no-show use case."""

from dataclasses import dataclass
from uuid import UUID

from booking_engine.application.services.notification_dispatcher import DispatchReport
from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.booking_error import NotFoundError
from booking_engine.domain.exceptions.validation_error import ValidationFailedError

logger = get_logger(__name__)


@dataclass
class CustomerNotCallRequest:
    """Request from the booked translator reporting that the customer never called."""

    job_id: UUID
    user_id: UUID


@dataclass
class CustomerNotCallResult:
    job: Job
    report: DispatchReport


class CustomerNotCallUseCase(BookingUseCase):
    """Use case closing a booking as not carried out by the customer."""

    async def execute(self, request: CustomerNotCallRequest) -> CustomerNotCallResult:
        now = self._now()
        job = await self._load_job(request.job_id)
        user = await self._load_user(request.user_id)

        translator = await self.ledger.current_translator(job.id)
        if translator is None:
            raise NotFoundError("Assignment for job", job.id)
        if user.id != translator.id and not user.is_admin():
            raise ValidationFailedError(
                "Only the booked translator can report a missed session", "user_id"
            )

        outcome = self.state_machine.plan_customer_not_call(job, translator, now)
        report = await self._commit_transition(job, outcome, actor=user)

        logger.info(
            "Booking marked as not carried out by customer",
            job_id=str(job.id),
            translator_id=str(translator.id),
        )
        return CustomerNotCallResult(job=job, report=report)
