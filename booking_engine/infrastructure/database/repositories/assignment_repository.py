"""Assignment repository implementation."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.interfaces.repositories import (
    AssignmentRepositoryInterface,
)
from booking_engine.domain.entities.assignment import Assignment
from booking_engine.domain.exceptions.booking_error import NotFoundError
from booking_engine.infrastructure.database.models.assignment import AssignmentModel
from booking_engine.infrastructure.database.models.job import JobModel


class AssignmentRepository(AssignmentRepositoryInterface):
    """Assignment repository implementation."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, assignment: Assignment) -> Assignment:
        """Insert a new assignment row."""
        model = AssignmentModel(
            id=assignment.id,
            job_id=assignment.job_id,
            translator_id=assignment.translator_id,
            created_at=assignment.created_at,
            updated_at=assignment.created_at,
            cancel_at=assignment.cancel_at,
            completed_at=assignment.completed_at,
            completed_by=assignment.completed_by,
        )
        self.session.add(model)
        await self.session.flush()
        await self.session.refresh(model)
        return self._model_to_entity(model)

    async def update(self, assignment: Assignment) -> Assignment:
        """Persist the close fields; the binding itself never changes."""
        result = await self.session.execute(
            select(AssignmentModel).where(AssignmentModel.id == assignment.id)
        )
        model = result.scalar_one_or_none()
        if not model:
            raise NotFoundError("Assignment", assignment.id)

        model.cancel_at = assignment.cancel_at
        model.completed_at = assignment.completed_at
        model.completed_by = assignment.completed_by

        await self.session.flush()
        await self.session.refresh(model)
        return self._model_to_entity(model)

    async def get_open_for_job(self, job_id: UUID) -> Optional[Assignment]:
        """Get the job's current assignment, if any."""
        result = await self.session.execute(
            self._open_rows()
            .where(AssignmentModel.job_id == job_id)
            .order_by(AssignmentModel.created_at.desc())
            .limit(1)
        )
        model = result.scalar_one_or_none()
        return self._model_to_entity(model) if model else None

    async def get_by_job_id(self, job_id: UUID) -> List[Assignment]:
        """Get all assignments for a job, oldest first."""
        result = await self.session.execute(
            select(AssignmentModel)
            .where(AssignmentModel.job_id == job_id)
            .order_by(AssignmentModel.created_at.asc())
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def find_open_for_translator(self, translator_id: UUID) -> List[Assignment]:
        """Get the open assignments held by a translator."""
        result = await self.session.execute(
            self._open_rows()
            .where(AssignmentModel.translator_id == translator_id)
            .order_by(AssignmentModel.created_at.asc())
        )
        return [self._model_to_entity(model) for model in result.scalars().all()]

    async def has_open_assignment_at(
        self, translator_id: UUID, due: datetime, exclude_job_id: Optional[UUID] = None
    ) -> bool:
        """Check if the translator holds an open assignment on a job due at ``due``."""
        stmt = (
            self._open_rows()
            .join(JobModel, JobModel.id == AssignmentModel.job_id)
            .where(
                AssignmentModel.translator_id == translator_id,
                JobModel.due == due,
            )
        )
        if exclude_job_id is not None:
            stmt = stmt.where(AssignmentModel.job_id != exclude_job_id)

        result = await self.session.execute(stmt.limit(1))
        return result.scalar_one_or_none() is not None

    @staticmethod
    def _open_rows():
        return select(AssignmentModel).where(
            AssignmentModel.cancel_at.is_(None),
            AssignmentModel.completed_at.is_(None),
        )

    def _model_to_entity(self, model: AssignmentModel) -> Assignment:
        """Convert SQLAlchemy model to domain entity."""
        return Assignment(
            id=model.id,
            job_id=model.job_id,
            translator_id=model.translator_id,
            created_at=model.created_at,
            cancel_at=model.cancel_at,
            completed_at=model.completed_at,
            completed_by=model.completed_by,
        )
