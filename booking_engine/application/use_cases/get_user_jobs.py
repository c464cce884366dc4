"""User booking lists use case."""

from dataclasses import dataclass, field
from typing import List
from uuid import UUID

from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.exceptions.validation_error import ValidationFailedError
from booking_engine.domain.value_objects.job_status import JobStatus

logger = get_logger(__name__)

CUSTOMER_ACTIVE_STATUSES = [JobStatus.PENDING, JobStatus.ASSIGNED, JobStatus.STARTED]
TRANSLATOR_ACTIVE_STATUSES = [JobStatus.ASSIGNED, JobStatus.STARTED]
HISTORY_STATUSES = [
    JobStatus.COMPLETED,
    JobStatus.WITHDRAWBEFORE24,
    JobStatus.WITHDRAWAFTER24,
    JobStatus.TIMEDOUT,
    JobStatus.NOT_CARRIED_OUT_CUSTOMER,
]


@dataclass
class UserJobsResult:
    """A user's bookings, immediate ones listed apart."""

    user: User
    history: bool
    page: int
    per_page: int
    emergency_jobs: List[Job] = field(default_factory=list)
    normal_jobs: List[Job] = field(default_factory=list)


class GetUserJobsUseCase(BookingUseCase):
    """
    Lists a customer's or translator's bookings.

    The current list holds a customer's open bookings, or the jobs a
    translator is bound to, soonest first. The history list holds closed
    bookings, most recent first.
    """

    async def execute(
        self, user_id: UUID, history: bool = False, page: int = 1, per_page: int = 15
    ) -> UserJobsResult:
        if page < 1:
            raise ValidationFailedError("Page numbers start at 1", "page")
        if per_page < 1:
            raise ValidationFailedError("Page size must be positive", "per_page")

        user = await self._load_user(user_id)
        offset = (page - 1) * per_page

        if user.is_customer():
            jobs = await self.job_repo.find_by_customer(
                user.id,
                HISTORY_STATUSES if history else CUSTOMER_ACTIVE_STATUSES,
                newest_first=history,
                limit=per_page,
                offset=offset,
            )
        elif user.is_translator():
            jobs = await self.job_repo.find_by_translator(
                user.id,
                HISTORY_STATUSES if history else TRANSLATOR_ACTIVE_STATUSES,
                open_assignments_only=not history,
                newest_first=history,
                limit=per_page,
                offset=offset,
            )
        else:
            raise ValidationFailedError(
                "Only customers and translators have bookings", "user_id"
            )

        result = UserJobsResult(user=user, history=history, page=page, per_page=per_page)
        for job in jobs:
            if job.immediate:
                result.emergency_jobs.append(job)
            else:
                result.normal_jobs.append(job)

        logger.debug(
            "User bookings listed",
            user_id=str(user.id),
            role=user.role.value,
            history=history,
            count=len(jobs),
        )
        return result
