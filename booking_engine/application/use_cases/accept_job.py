"""Accept booking use case."""

from dataclasses import dataclass
from uuid import UUID

from booking_engine.application.services.assignment_ledger import Binding
from booking_engine.application.services.notification_dispatcher import DispatchReport
from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.assignment import Assignment
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.validation_error import ValidationFailedError

logger = get_logger(__name__)


@dataclass
class AcceptJobRequest:
    """Request for a translator to take a booking."""

    job_id: UUID
    translator_id: UUID


@dataclass
class AcceptJobResult:
    """Result of a successful acceptance."""

    job: Job
    assignment: Assignment
    report: DispatchReport


class AcceptJobUseCase(BookingUseCase):
    """Use case binding a translator to a pending booking."""

    async def execute(self, request: AcceptJobRequest) -> AcceptJobResult:
        """
        Accept the job for the translator.

        Raises:
            AlreadyBookedError: The translator holds another booking at that time.
            JobNotAcceptableError: Someone else got the job first, or it closed.
        """
        now = self._now()
        translator = await self._load_user(request.translator_id, "Translator")
        if not translator.is_translator() or not translator.is_active():
            raise ValidationFailedError(
                "Only active translators can accept bookings", "translator_id"
            )

        job = await self._load_job(request.job_id)
        customer = await self._load_user(job.user_id, "Customer")

        # Rejects closed jobs before taking the lock; the ledger re-checks under it
        outcome = self.state_machine.plan_accept(job, translator, customer, now)

        binding: Binding = await self.transaction.execute_in_transaction(
            lambda: self.ledger.bind(job.id, translator, now)
        )
        job.status = binding.job.status
        job.updated_at = binding.job.updated_at

        logger.info(
            "Booking accepted",
            job_id=str(job.id),
            translator_id=str(translator.id),
            customer_id=str(customer.id),
        )

        report = await self.dispatcher.dispatch(outcome.intents)
        return AcceptJobResult(job=job, assignment=binding.assignment, report=report)
