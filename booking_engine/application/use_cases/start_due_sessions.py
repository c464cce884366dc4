"""Session start sweep use case."""

from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.application.use_cases.expire_pending_jobs import SweepResult
from booking_engine.config.logging import get_logger
from booking_engine.domain.exceptions.booking_error import BookingError

logger = get_logger(__name__)


class StartDueSessionsUseCase(BookingUseCase):
    """Moves assigned bookings to started once their session time has come."""

    async def execute(self, limit: int = 100) -> SweepResult:
        now = self._now()
        jobs = await self.job_repo.find_due_assigned(now, limit)
        result = SweepResult()

        for job in jobs:
            result.processed += 1
            try:
                outcome = self.state_machine.plan_start(job, now)
                await self._commit_transition(job, outcome)
                result.changed.append(job.id)
            except BookingError as e:
                logger.warning("Could not start session", job_id=str(job.id), error=str(e))
                result.failed.append(job.id)

        logger.info(
            "Session start sweep finished",
            processed=result.processed,
            started=len(result.changed),
            failed=len(result.failed),
        )
        return result
