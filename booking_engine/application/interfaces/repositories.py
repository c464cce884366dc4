"""
Repository interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, List, Optional
from uuid import UUID

from booking_engine.domain.entities.assignment import Assignment
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.value_objects.job_attributes import (
    Certification,
    Gender,
    JobType,
)
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.domain.value_objects.translator import (
    TranslatorLevel,
    TranslatorType,
)


@dataclass(frozen=True)
class TranslatorCriteria:
    """Coarse filter pushed down to storage when listing translators."""

    translator_type: Optional[TranslatorType] = None
    language_id: Optional[int] = None
    gender: Optional[Gender] = None
    levels: Optional[FrozenSet[TranslatorLevel]] = None
    active_only: bool = True


@dataclass(frozen=True)
class JobCriteria:
    """
    Coarse filter pushed down to storage when listing open jobs for a translator.

    ``translator_gender`` keeps jobs without a gender constraint plus those
    asking for that gender; ``None`` keeps only unconstrained jobs.
    """

    job_types: FrozenSet[JobType]
    language_ids: FrozenSet[int]
    certifications: FrozenSet[Certification]
    translator_gender: Optional[Gender] = None
    due_after: Optional[datetime] = None
    excluded_customer_ids: FrozenSet[UUID] = frozenset()

    @classmethod
    def for_translator(
        cls,
        translator: User,
        due_after: Optional[datetime] = None,
        excluded_customer_ids: FrozenSet[UUID] = frozenset(),
    ) -> "JobCriteria":
        level = translator.translator_level
        return cls(
            job_types=frozenset(
                job_type
                for job_type in JobType
                if TranslatorType.for_job_type(job_type) == translator.translator_type
            ),
            language_ids=frozenset(translator.language_ids),
            certifications=frozenset(
                certified for certified in Certification if level in certified.acceptable_levels()
            ),
            translator_gender=translator.gender,
            due_after=due_after,
            excluded_customer_ids=excluded_customer_ids,
        )


class JobRepositoryInterface(ABC):
    """Job repository interface."""

    @abstractmethod
    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        """Get job by ID."""
        pass

    @abstractmethod
    async def create(self, job: Job) -> Job:
        """Create a new job."""
        pass

    @abstractmethod
    async def update(self, job: Job) -> Job:
        """Update an existing job."""
        pass

    @abstractmethod
    async def compare_and_set_status(
        self, job_id: UUID, expected: JobStatus, new: JobStatus, changed_at: datetime
    ) -> bool:
        """Change the status only if it still equals ``expected``."""
        pass

    @abstractmethod
    async def find_by_customer(
        self,
        customer_id: UUID,
        statuses: List[JobStatus],
        newest_first: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        """Find a customer's jobs in any of the given statuses, ordered by due."""
        pass

    @abstractmethod
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
        pass

    @abstractmethod
    async def find_pending_matching(
        self, criteria: JobCriteria, limit: int = 100
    ) -> List[Job]:
        """Find pending jobs matching the criteria, soonest due first."""
        pass

    @abstractmethod
    async def find_expiring(self, now: datetime, limit: int = 100) -> List[Job]:
        """Find pending jobs whose expiry time has passed."""
        pass

    @abstractmethod
    async def find_due_assigned(self, now: datetime, limit: int = 100) -> List[Job]:
        """Find assigned jobs whose session has begun."""
        pass


class UserRepositoryInterface(ABC):
    """User repository interface."""

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by e-mail address."""
        pass

    @abstractmethod
    async def find_translators(self, criteria: TranslatorCriteria) -> List[User]:
        """List translators matching the coarse criteria."""
        pass


class AssignmentRepositoryInterface(ABC):
    """Assignment repository interface."""

    @abstractmethod
    async def create(self, assignment: Assignment) -> Assignment:
        """Insert a new assignment row."""
        pass

    @abstractmethod
    async def update(self, assignment: Assignment) -> Assignment:
        """Persist the close fields of an assignment."""
        pass

    @abstractmethod
    async def get_open_for_job(self, job_id: UUID) -> Optional[Assignment]:
        """Get the job's current assignment, if any."""
        pass

    @abstractmethod
    async def get_by_job_id(self, job_id: UUID) -> List[Assignment]:
        """Get all assignments for a job, oldest first."""
        pass

    @abstractmethod
    async def find_open_for_translator(self, translator_id: UUID) -> List[Assignment]:
        """Get the open assignments held by a translator."""
        pass

    @abstractmethod
    async def has_open_assignment_at(
        self, translator_id: UUID, due: datetime, exclude_job_id: Optional[UUID] = None
    ) -> bool:
        """Check if the translator holds an open assignment on a job due at ``due``."""
        pass


class BlacklistRepositoryInterface(ABC):
    """Customer blacklist repository interface."""

    @abstractmethod
    async def get_blocked_translator_ids(self, customer_id: UUID) -> FrozenSet[UUID]:
        """Translators a customer does not want to be matched with."""
        pass

    @abstractmethod
    async def get_blocking_customer_ids(self, translator_id: UUID) -> FrozenSet[UUID]:
        """Customers that have blocked a translator."""
        pass


class LanguageRepositoryInterface(ABC):
    """Language lookup interface."""

    @abstractmethod
    async def get_name(self, language_id: int) -> Optional[str]:
        """Get the display name of a language."""
        pass
