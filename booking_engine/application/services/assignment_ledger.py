"""
Assignment Ledger: append-only record of which translator holds which booking.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from booking_engine.application.interfaces.repositories import (
    AssignmentRepositoryInterface,
    JobRepositoryInterface,
    UserRepositoryInterface,
)
from booking_engine.application.interfaces.services import (
    ClockInterface,
    JobLockInterface,
)
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.assignment import Assignment
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.exceptions.booking_error import (
    AlreadyBookedError,
    InvalidTransitionError,
    JobNotAcceptableError,
    NotFoundError,
)
from booking_engine.domain.exceptions.validation_error import ValidationFailedError
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.infrastructure.monitoring.metrics import (
    record_assignment_conflict,
    record_transition,
)

logger = get_logger(__name__)


@dataclass
class Binding:
    """Result of a successful acceptance."""

    job: Job
    assignment: Assignment


@dataclass
class Reassignment:
    """Translator identity before and after an admin change."""

    job_id: UUID
    old_translator_id: Optional[UUID]
    new_translator_id: UUID
    assignment: Optional[Assignment] = None

    @property
    def changed(self) -> bool:
        return self.old_translator_id != self.new_translator_id


class AssignmentLedger:
    """Opens and closes translator assignments under a per-job lock."""

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        assignment_repo: AssignmentRepositoryInterface,
        user_repo: UserRepositoryInterface,
        job_lock: JobLockInterface,
        clock: ClockInterface,
    ):
        self.job_repo = job_repo
        self.assignment_repo = assignment_repo
        self.user_repo = user_repo
        self.job_lock = job_lock
        self.clock = clock

    async def bind(
        self, job_id: UUID, translator: User, now: Optional[datetime] = None
    ) -> Binding:
        """
        Bind a translator to a pending job.

        The status read, status write and assignment insert run under the
        job lock; the repository compare-and-set guards deployments where the
        lock is only process-local.

        Raises:
            NotFoundError: The job does not exist.
            AlreadyBookedError: The translator holds another booking due at the same time.
            JobNotAcceptableError: The job is no longer pending.
        """
        now = now or self.clock.now()

        async with self.job_lock.acquire(job_id):
            job = await self.job_repo.get_by_id(job_id)
            if not job:
                raise NotFoundError("Job", job_id)

            if await self.assignment_repo.has_open_assignment_at(
                translator.id, job.due, exclude_job_id=job.id
            ):
                record_assignment_conflict("already_booked")
                logger.info(
                    "Translator already booked at due time",
                    job_id=str(job.id),
                    translator_id=str(translator.id),
                    due=job.due.isoformat(),
                )
                raise AlreadyBookedError(translator.id, job.due)

            if job.status != JobStatus.PENDING:
                record_assignment_conflict("not_pending")
                raise JobNotAcceptableError(job.id, job.status)

            won = await self.job_repo.compare_and_set_status(
                job.id, JobStatus.PENDING, JobStatus.ASSIGNED, now
            )
            if not won:
                record_assignment_conflict("lost_race")
                raise JobNotAcceptableError(job.id, "assigned")

            assignment = await self.assignment_repo.create(
                Assignment(job_id=job.id, translator_id=translator.id, created_at=now)
            )
            job.status = JobStatus.ASSIGNED
            job.updated_at = now

        record_transition(JobStatus.PENDING.value, JobStatus.ASSIGNED.value)
        logger.info(
            "Translator bound to job",
            job_id=str(job.id),
            translator_id=str(translator.id),
            assignment_id=str(assignment.id),
        )
        return Binding(job=job, assignment=assignment)

    async def resolve_translator(
        self,
        translator_id: Optional[UUID] = None,
        translator_email: Optional[str] = None,
    ) -> User:
        """Load a translator by id, or by e-mail when no id is given."""
        if translator_id:
            translator = await self.user_repo.get_by_id(translator_id)
            identifier = translator_id
        elif translator_email:
            translator = await self.user_repo.get_by_email(translator_email)
            identifier = translator_email
        else:
            raise ValidationFailedError(
                "A translator id or e-mail is required", "translator"
            )

        if not translator:
            raise NotFoundError("Translator", identifier)
        if not translator.is_translator():
            raise ValidationFailedError(f"User {identifier} is not a translator", "translator")
        return translator

    async def reassign(
        self,
        job: Job,
        new_translator_id: Optional[UUID] = None,
        new_translator_email: Optional[str] = None,
        now: Optional[datetime] = None,
        due: Optional[datetime] = None,
    ) -> Reassignment:
        """
        Move the job to another translator.

        The current assignment is closed with ``cancel_at`` and a new row is
        appended. Naming the translator that already holds the job is a no-op.
        ``due`` is the session time the job will have, when an edit moves it.

        Raises:
            AlreadyBookedError: The new translator holds another booking due at that time.
        """
        now = now or self.clock.now()
        due = due or job.due
        translator = await self.resolve_translator(new_translator_id, new_translator_email)

        async with self.job_lock.acquire(job.id):
            current = await self.assignment_repo.get_open_for_job(job.id)
            old_translator_id = current.translator_id if current else None

            if old_translator_id == translator.id:
                return Reassignment(job.id, old_translator_id, translator.id, current)

            if await self.assignment_repo.has_open_assignment_at(
                translator.id, due, exclude_job_id=job.id
            ):
                record_assignment_conflict("already_booked")
                logger.info(
                    "Translator already booked at due time",
                    job_id=str(job.id),
                    translator_id=str(translator.id),
                    due=due.isoformat(),
                )
                raise AlreadyBookedError(translator.id, due)

            if current:
                current.cancel(now)
                await self.assignment_repo.update(current)

            assignment = await self.assignment_repo.create(
                Assignment(job_id=job.id, translator_id=translator.id, created_at=now)
            )

        logger.info(
            "Job reassigned",
            job_id=str(job.id),
            old_translator_id=str(old_translator_id) if old_translator_id else None,
            new_translator_id=str(translator.id),
        )
        return Reassignment(job.id, old_translator_id, translator.id, assignment)

    async def close(
        self, assignment: Assignment, completed_by: UUID, completed_at: datetime
    ) -> Assignment:
        """
        Record completion of an assignment.

        Raises:
            InvalidTransitionError: The assignment was already closed.
        """
        async with self.job_lock.acquire(assignment.job_id):
            current = await self.assignment_repo.get_open_for_job(assignment.job_id)
            if current is None or current.id != assignment.id:
                raise InvalidTransitionError(
                    "closed", "completed", f"assignment {assignment.id} is already closed"
                )
            current.complete(completed_by, completed_at)
            await self.assignment_repo.update(current)

        logger.info(
            "Assignment completed",
            job_id=str(current.job_id),
            assignment_id=str(current.id),
            completed_by=str(completed_by),
        )
        return current

    async def complete_current(
        self, job_id: UUID, completed_by: UUID, completed_at: datetime
    ) -> Optional[Assignment]:
        """Complete the job's open assignment if it has one."""
        current = await self.assignment_repo.get_open_for_job(job_id)
        if current is None:
            return None
        return await self.close(current, completed_by, completed_at)

    async def release(self, job_id: UUID, now: Optional[datetime] = None) -> Optional[Assignment]:
        """Cancel the job's open assignment, if any."""
        now = now or self.clock.now()

        async with self.job_lock.acquire(job_id):
            current = await self.assignment_repo.get_open_for_job(job_id)
            if current is None:
                return None
            current.cancel(now)
            await self.assignment_repo.update(current)

        logger.info(
            "Assignment released",
            job_id=str(job_id),
            translator_id=str(current.translator_id),
        )
        return current

    async def is_translator_booked_at(
        self, translator_id: UUID, due: datetime, exclude_job_id: Optional[UUID] = None
    ) -> bool:
        """Check if the translator already holds a booking due at exactly ``due``."""
        return await self.assignment_repo.has_open_assignment_at(
            translator_id, due, exclude_job_id=exclude_job_id
        )

    async def current(self, job_id: UUID) -> Optional[Assignment]:
        """The job's open assignment."""
        return await self.assignment_repo.get_open_for_job(job_id)

    async def current_translator(self, job_id: UUID) -> Optional[User]:
        """The translator holding the job's open assignment."""
        assignment = await self.current(job_id)
        if assignment is None:
            return None
        return await self.user_repo.get_by_id(assignment.translator_id)

    async def history(self, job_id: UUID) -> List[Assignment]:
        """Every assignment the job has had, oldest first."""
        return await self.assignment_repo.get_by_job_id(job_id)
