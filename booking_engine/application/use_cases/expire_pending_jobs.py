"""Expiry sweep use case."""

from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.exceptions.booking_error import BookingError

logger = get_logger(__name__)


@dataclass
class SweepResult:
    """Outcome of one scheduled sweep."""

    processed: int = 0
    changed: List[UUID] = field(default_factory=list)
    failed: List[UUID] = field(default_factory=list)


class ExpirePendingJobsUseCase(BookingUseCase):
    """Times out pending bookings nobody accepted before their expiry."""

    async def execute(self, limit: int = 100) -> SweepResult:
        now = self._now()
        jobs = await self.job_repo.find_expiring(now, limit)
        result = SweepResult()

        for job in jobs:
            result.processed += 1
            try:
                customer = await self._load_user(job.user_id, "Customer")
                outcome = self.state_machine.plan_expire(job, customer, now)
                await self._commit_transition(job, outcome)
                result.changed.append(job.id)
            except BookingError as e:
                # Accepted or edited since it was listed; the next run will see its new state
                logger.warning("Could not expire job", job_id=str(job.id), error=str(e))
                result.failed.append(job.id)

        logger.info(
            "Expiry sweep finished",
            processed=result.processed,
            expired=len(result.changed),
            failed=len(result.failed),
        )
        return result
