"""End session use case."""

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
class EndJobRequest:
    """Request from a party to end a running session."""

    job_id: UUID
    user_id: UUID


@dataclass
class EndJobResult:
    job: Job
    report: DispatchReport


class EndJobUseCase(BookingUseCase):
    """Use case completing a started session."""

    async def execute(self, request: EndJobRequest) -> EndJobResult:
        now = self._now()
        job = await self._load_job(request.job_id)
        user = await self._load_user(request.user_id)

        translator = await self.ledger.current_translator(job.id)
        if translator is None:
            raise NotFoundError("Assignment for job", job.id)
        if user.id not in (job.user_id, translator.id):
            raise ValidationFailedError(
                "Only the booking's customer or translator can end the session", "user_id"
            )

        customer = await self._load_user(job.user_id, "Customer")
        outcome = self.state_machine.plan_end(job, user, customer, translator, now)
        report = await self._commit_transition(job, outcome, actor=user)

        logger.info(
            "Session ended",
            job_id=str(job.id),
            ended_by=str(user.id),
            session_time=job.session_time,
        )
        return EndJobResult(job=job, report=report)
