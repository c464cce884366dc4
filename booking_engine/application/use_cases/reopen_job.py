"""Reopen booking use case."""

from dataclasses import dataclass
from uuid import UUID

from booking_engine.application.services.notification_dispatcher import DispatchReport
from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.validation_error import ValidationFailedError
from booking_engine.domain.value_objects.job_status import JobStatus

logger = get_logger(__name__)


@dataclass
class ReopenJobRequest:
    """Request to put a booking back on the market."""

    job_id: UUID
    user_id: UUID


@dataclass
class ReopenJobResult:
    """Result of a reopen; ``job`` is the new row when ``created_new`` is set."""

    job: Job
    created_new: bool
    report: DispatchReport


class ReopenJobUseCase(BookingUseCase):
    """
    Use case reopening a booking.

    A timed out booking is copied into a new pending job linked to the
    original; any other booking is reset to pending on the same record.
    Either way the previous translator is released and suitable translators
    are offered the job again.
    """

    async def execute(self, request: ReopenJobRequest) -> ReopenJobResult:
        now = self._now()
        job = await self._load_job(request.job_id)
        user = await self._load_user(request.user_id)
        if user.id != job.user_id and not user.is_admin():
            raise ValidationFailedError(
                "Only the booking's customer or an administrator can reopen it", "user_id"
            )
        customer = await self._load_user(job.user_id, "Customer")

        if job.status != JobStatus.TIMEDOUT:
            outcome = self.state_machine.plan_reopen(job, customer, now)
            report = await self._commit_transition(job, outcome, actor=user)
            logger.info("Booking reopened in place", job_id=str(job.id))
            return ReopenJobResult(job=job, created_new=False, report=report)

        reopened, intents = self.state_machine.reopened_copy(job, customer, now)

        async def persist() -> Job:
            await self.ledger.release(job.id, now)
            return await self.job_repo.create(reopened)

        created = await self.transaction.execute_in_transaction(persist)

        logger.info(
            "Timed out booking reopened as a new job",
            job_id=str(created.id),
            reopened_from_id=str(job.id),
            will_expire_at=created.will_expire_at.isoformat(),
        )

        intents.extend(await self._suitable_translator_intents(created))
        report = await self.dispatcher.dispatch(intents)
        return ReopenJobResult(job=created, created_new=True, report=report)
