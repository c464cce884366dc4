"""Job repository implementation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.interfaces.repositories import (
    JobCriteria,
    JobRepositoryInterface,
)
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.booking_error import NotFoundError
from booking_engine.domain.value_objects.job_attributes import (
    Certification,
    Gender,
    JobType,
)
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.infrastructure.database.models.assignment import AssignmentModel
from booking_engine.infrastructure.database.models.job import JobModel

logger = get_logger(__name__)

# Columns copied one to one between the entity and the model
_FIELDS = (
    "user_id",
    "from_language_id",
    "immediate",
    "due",
    "duration",
    "customer_phone_type",
    "customer_physical_type",
    "town",
    "created_at",
    "updated_at",
    "will_expire_at",
    "admin_comments",
    "flagged",
    "manually_handled",
    "by_admin",
    "user_email",
    "reference",
    "session_time",
    "end_at",
    "withdraw_at",
    "reopened_from_id",
    "email_sent",
    "cust_16_hour_email",
    "cust_48_hour_email",
)


class JobRepository(JobRepositoryInterface):
    """Job repository implementation."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID."""
        stmt = select(JobModel).where(JobModel.id == job_id)
        result = await self.db.execute(stmt)
        model = result.scalar_one_or_none()

        return self._model_to_entity(model) if model else None

    async def create(self, job: Job) -> Job:
        """Create a new job."""
        job_model = JobModel(id=job.id)
        self._entity_to_model(job, job_model)

        self.db.add(job_model)
        # Use flush instead of commit to maintain transaction atomicity
        await self.db.flush()
        await self.db.refresh(job_model)

        return self._model_to_entity(job_model)

    async def update(self, job: Job) -> Job:
        """Update an existing job."""
        stmt = select(JobModel).where(JobModel.id == job.id)
        result = await self.db.execute(stmt)
        job_model = result.scalar_one_or_none()

        if not job_model:
            raise NotFoundError("Job", job.id)

        self._entity_to_model(job, job_model)

        await self.db.flush()
        await self.db.refresh(job_model)

        return self._model_to_entity(job_model)

    async def compare_and_set_status(
        self, job_id: UUID, expected: JobStatus, new: JobStatus, changed_at: datetime
    ) -> bool:
        """Single UPDATE guarded on the current status; losing writers see zero rows."""
        stmt = (
            update(JobModel)
            .where(JobModel.id == job_id, JobModel.status == expected.value)
            .values(status=new.value, updated_at=changed_at)
            .execution_options(synchronize_session="fetch")
        )
        result = await self.db.execute(stmt)
        won = result.rowcount == 1

        if not won:
            logger.info(
                "Job status compare-and-set lost",
                job_id=str(job_id),
                expected=expected.value,
                new=new.value,
            )
        return won

    async def find_by_customer(
        self,
        customer_id: UUID,
        statuses: List[JobStatus],
        newest_first: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        """Find a customer's jobs in any of the given statuses, ordered by due."""
        stmt = select(JobModel).where(
            JobModel.user_id == customer_id,
            JobModel.status.in_([s.value for s in statuses]),
        )
        return await self._page(stmt, newest_first, limit, offset)

    async def find_by_translator(
        self,
        translator_id: UUID,
        statuses: List[JobStatus],
        open_assignments_only: bool = False,
        newest_first: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        """Find jobs the translator has been assigned to, ordered by due."""
        held = select(AssignmentModel.job_id).where(
            AssignmentModel.translator_id == translator_id
        )
        if open_assignments_only:
            held = held.where(
                AssignmentModel.cancel_at.is_(None), AssignmentModel.completed_at.is_(None)
            )

        stmt = select(JobModel).where(
            JobModel.id.in_(held),
            JobModel.status.in_([s.value for s in statuses]),
        )
        return await self._page(stmt, newest_first, limit, offset)

    async def find_pending_matching(
        self, criteria: JobCriteria, limit: int = 100
    ) -> List[Job]:
        """Find pending jobs matching the criteria; the limit applies after filtering."""
        gender_filter = JobModel.gender.is_(None)
        if criteria.translator_gender:
            gender_filter = or_(
                gender_filter, JobModel.gender == criteria.translator_gender.value
            )

        stmt = select(JobModel).where(
            JobModel.status == JobStatus.PENDING.value,
            JobModel.job_type.in_([job_type.value for job_type in criteria.job_types]),
            JobModel.from_language_id.in_(list(criteria.language_ids)),
            JobModel.certified.in_([c.value for c in criteria.certifications]),
            gender_filter,
        )
        if criteria.due_after is not None:
            stmt = stmt.where(JobModel.due > criteria.due_after)
        if criteria.excluded_customer_ids:
            stmt = stmt.where(JobModel.user_id.not_in(list(criteria.excluded_customer_ids)))

        result = await self.db.execute(stmt.order_by(JobModel.due.asc()).limit(limit))
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_expiring(self, now: datetime, limit: int = 100) -> List[Job]:
        """Find pending jobs whose expiry time has passed."""
        stmt = (
            select(JobModel)
            .where(
                JobModel.status == JobStatus.PENDING.value,
                JobModel.will_expire_at.is_not(None),
                JobModel.will_expire_at <= now,
            )
            .order_by(JobModel.will_expire_at.asc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_due_assigned(self, now: datetime, limit: int = 100) -> List[Job]:
        """Find assigned jobs whose session has begun."""
        stmt = (
            select(JobModel)
            .where(JobModel.status == JobStatus.ASSIGNED.value, JobModel.due <= now)
            .order_by(JobModel.due.asc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def _page(self, stmt, newest_first: bool, limit: int, offset: int) -> List[Job]:
        order = JobModel.due.desc() if newest_first else JobModel.due.asc()
        result = await self.db.execute(stmt.order_by(order).offset(offset).limit(limit))
        return [self._model_to_entity(model) for model in result.scalars().all()]

    def _entity_to_model(self, job: Job, model: JobModel) -> None:
        for name in _FIELDS:
            setattr(model, name, getattr(job, name))
        model.status = job.status.value
        model.gender = job.gender.value if job.gender else None
        model.certified = job.certified.value
        model.job_type = job.job_type.value

    def _model_to_entity(self, model: JobModel) -> Job:
        """Convert SQLAlchemy model to domain entity."""
        return Job(
            id=model.id,
            status=JobStatus(model.status),
            gender=Gender(model.gender) if model.gender else None,
            certified=Certification.parse(model.certified),
            job_type=JobType(model.job_type),
            **{name: getattr(model, name) for name in _FIELDS},
        )
