"""
Pytest configuration and fixtures.
"""

import copy
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Dict, FrozenSet, List, Optional, Set, Tuple
from uuid import UUID

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from booking_engine.application.interfaces.repositories import (
    AssignmentRepositoryInterface,
    BlacklistRepositoryInterface,
    JobCriteria,
    JobRepositoryInterface,
    LanguageRepositoryInterface,
    TranslatorCriteria,
    UserRepositoryInterface,
)
from booking_engine.application.interfaces.services import (
    ClockInterface,
    TransactionInterface,
)
from booking_engine.application.services.assignment_ledger import AssignmentLedger
from booking_engine.application.services.business_hours import NightWindow
from booking_engine.application.services.expiry_calculator import will_expire_at
from booking_engine.application.services.job_lock import InMemoryJobLock
from booking_engine.application.services.job_state_machine import JobStateMachine
from booking_engine.application.services.message_templates import MessageTemplates
from booking_engine.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from booking_engine.application.services.translator_matching_engine import (
    TranslatorMatchingEngine,
)
from booking_engine.application.use_cases.booking_orchestrator import (
    BookingOrchestrator,
)
from booking_engine.config.settings import Settings
from booking_engine.domain.entities.assignment import Assignment
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import NotificationPreferences, User
from booking_engine.domain.exceptions.booking_error import NotFoundError
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.domain.value_objects.translator import (
    TranslatorLevel,
    TranslatorType,
)
from booking_engine.domain.value_objects.user_role import UserRole
from booking_engine.infrastructure.channels.mock import MockChannel
from booking_engine.infrastructure.database.models import Base

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Monday morning, outside the night window
NOW = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)

SWEDISH = 1
ARABIC = 2


class FixedClock(ClockInterface):
    """Clock the tests move by hand."""

    def __init__(self, now: datetime = NOW):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


class InMemoryJobRepository(JobRepositoryInterface):
    """Stores copies so callers never share state with the store."""

    def __init__(self):
        self.jobs: Dict[UUID, Job] = {}
        # Shared with InMemoryAssignmentRepository for translator lookups
        self.assignment_rows: List[Assignment] = []

    async def get_by_id(self, job_id: UUID) -> Optional[Job]:
        job = self.jobs.get(job_id)
        return copy.deepcopy(job) if job else None

    async def create(self, job: Job) -> Job:
        self.jobs[job.id] = copy.deepcopy(job)
        return copy.deepcopy(job)

    async def update(self, job: Job) -> Job:
        if job.id not in self.jobs:
            raise NotFoundError("Job", job.id)
        self.jobs[job.id] = copy.deepcopy(job)
        return copy.deepcopy(job)

    async def compare_and_set_status(
        self, job_id: UUID, expected: JobStatus, new: JobStatus, changed_at: datetime
    ) -> bool:
        stored = self.jobs.get(job_id)
        if stored is None or stored.status != expected:
            return False
        stored.status = new
        stored.updated_at = changed_at
        return True

    async def find_by_customer(
        self,
        customer_id: UUID,
        statuses: List[JobStatus],
        newest_first: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        jobs = [
            job
            for job in self.jobs.values()
            if job.user_id == customer_id and job.status in statuses
        ]
        return self._page(jobs, newest_first, limit, offset)

    async def find_by_translator(
        self,
        translator_id: UUID,
        statuses: List[JobStatus],
        open_assignments_only: bool = False,
        newest_first: bool = False,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Job]:
        held = {
            row.job_id
            for row in self.assignment_rows
            if row.translator_id == translator_id
            and (row.is_open() or not open_assignments_only)
        }
        jobs = [
            job for job in self.jobs.values() if job.id in held and job.status in statuses
        ]
        return self._page(jobs, newest_first, limit, offset)

    async def find_pending_matching(self, criteria: JobCriteria, limit: int = 100) -> List[Job]:
        jobs = [
            job
            for job in self.jobs.values()
            if job.status == JobStatus.PENDING
            and job.job_type in criteria.job_types
            and job.from_language_id in criteria.language_ids
            and job.certified in criteria.certifications
            and job.gender in (None, criteria.translator_gender)
            and (criteria.due_after is None or job.is_in_future(criteria.due_after))
            and job.user_id not in criteria.excluded_customer_ids
        ]
        jobs.sort(key=lambda job: job.due)
        return [copy.deepcopy(job) for job in jobs[:limit]]

    async def find_expiring(self, now: datetime, limit: int = 100) -> List[Job]:
        jobs = [
            job
            for job in self.jobs.values()
            if job.status == JobStatus.PENDING
            and job.will_expire_at is not None
            and job.will_expire_at <= now
        ]
        jobs.sort(key=lambda job: job.will_expire_at)
        return [copy.deepcopy(job) for job in jobs[:limit]]

    async def find_due_assigned(self, now: datetime, limit: int = 100) -> List[Job]:
        jobs = [
            job
            for job in self.jobs.values()
            if job.status == JobStatus.ASSIGNED and job.due <= now
        ]
        jobs.sort(key=lambda job: job.due)
        return [copy.deepcopy(job) for job in jobs[:limit]]

    @staticmethod
    def _page(jobs: List[Job], newest_first: bool, limit: int, offset: int) -> List[Job]:
        jobs.sort(key=lambda job: job.due, reverse=newest_first)
        return [copy.deepcopy(job) for job in jobs[offset : offset + limit]]

    def stored(self, job_id: UUID) -> Job:
        return self.jobs[job_id]


class InMemoryUserRepository(UserRepositoryInterface):
    def __init__(self):
        self.users: Dict[UUID, User] = {}

    def add(self, user: User) -> User:
        self.users[user.id] = user
        return user

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        return self.users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        for user in self.users.values():
            if user.email == email:
                return user
        return None

    async def find_translators(self, criteria: TranslatorCriteria) -> List[User]:
        translators = []
        for user in self.users.values():
            if not user.is_translator():
                continue
            if criteria.active_only and not user.is_active():
                continue
            if criteria.translator_type and user.translator_type != criteria.translator_type:
                continue
            if criteria.gender and user.gender != criteria.gender:
                continue
            if criteria.levels is not None and user.translator_level not in criteria.levels:
                continue
            if criteria.language_id is not None and not user.speaks(criteria.language_id):
                continue
            translators.append(user)
        return translators


class InMemoryAssignmentRepository(AssignmentRepositoryInterface):
    def __init__(self, job_repo: InMemoryJobRepository):
        self.job_repo = job_repo
        self.rows = job_repo.assignment_rows

    async def create(self, assignment: Assignment) -> Assignment:
        self.rows.append(copy.deepcopy(assignment))
        return copy.deepcopy(assignment)

    async def update(self, assignment: Assignment) -> Assignment:
        for index, row in enumerate(self.rows):
            if row.id == assignment.id:
                self.rows[index] = copy.deepcopy(assignment)
                return copy.deepcopy(assignment)
        raise NotFoundError("Assignment", assignment.id)

    async def get_open_for_job(self, job_id: UUID) -> Optional[Assignment]:
        for row in reversed(self.rows):
            if row.job_id == job_id and row.is_open():
                return copy.deepcopy(row)
        return None

    async def get_by_job_id(self, job_id: UUID) -> List[Assignment]:
        return [copy.deepcopy(row) for row in self.rows if row.job_id == job_id]

    async def find_open_for_translator(self, translator_id: UUID) -> List[Assignment]:
        return [
            copy.deepcopy(row)
            for row in self.rows
            if row.translator_id == translator_id and row.is_open()
        ]

    async def has_open_assignment_at(
        self, translator_id: UUID, due: datetime, exclude_job_id: Optional[UUID] = None
    ) -> bool:
        for row in self.rows:
            if row.translator_id != translator_id or not row.is_open():
                continue
            if exclude_job_id is not None and row.job_id == exclude_job_id:
                continue
            job = self.job_repo.jobs.get(row.job_id)
            if job is not None and job.due == due:
                return True
        return False


class InMemoryBlacklistRepository(BlacklistRepositoryInterface):
    def __init__(self):
        self.pairs: Set[Tuple[UUID, UUID]] = set()

    def block(self, customer: User, translator: User) -> None:
        self.pairs.add((customer.id, translator.id))

    async def get_blocked_translator_ids(self, customer_id: UUID) -> FrozenSet[UUID]:
        return frozenset(t for c, t in self.pairs if c == customer_id)

    async def get_blocking_customer_ids(self, translator_id: UUID) -> FrozenSet[UUID]:
        return frozenset(c for c, t in self.pairs if t == translator_id)


class InMemoryLanguageRepository(LanguageRepositoryInterface):
    def __init__(self, names: Optional[Dict[int, str]] = None):
        self.names = names if names is not None else {SWEDISH: "Swedish", ARABIC: "Arabic"}

    async def get_name(self, language_id: int) -> Optional[str]:
        return self.names.get(language_id)


class RecordingTransaction(TransactionInterface):
    """Runs the operation and counts how the unit of work ended."""

    def __init__(self):
        self.commits = 0
        self.rollbacks = 0

    async def execute_in_transaction(self, operation):
        try:
            result = await operation()
        except Exception:
            self.rollbacks += 1
            raise
        self.commits += 1
        return result

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


class UserFactory:
    """Builds users and registers them with the fake user repository."""

    def __init__(self, repo: InMemoryUserRepository):
        self.repo = repo
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def customer(self, **overrides) -> User:
        n = self._next()
        fields = dict(
            role=UserRole.CUSTOMER,
            name=f"Customer {n}",
            email=f"customer{n}@example.com",
            mobile=f"+4670000{n:04d}",
            town="Stockholm",
        )
        fields.update(overrides)
        return self.repo.add(User(**fields))

    def translator(self, **overrides) -> User:
        n = self._next()
        fields = dict(
            role=UserRole.TRANSLATOR,
            name=f"Translator {n}",
            email=f"translator{n}@example.com",
            mobile=f"+4673000{n:04d}",
            translator_type=TranslatorType.VOLUNTEER,
            translator_level=TranslatorLevel.CERTIFIED,
            language_ids=frozenset({SWEDISH}),
            town="Stockholm",
        )
        if "preferences" in overrides and isinstance(overrides["preferences"], dict):
            overrides["preferences"] = NotificationPreferences(**overrides["preferences"])
        fields.update(overrides)
        return self.repo.add(User(**fields))

    def admin(self, **overrides) -> User:
        n = self._next()
        fields = dict(role=UserRole.ADMIN, name=f"Admin {n}", email=f"admin{n}@example.com")
        fields.update(overrides)
        return self.repo.add(User(**fields))


@dataclass
class BookingHarness:
    """Orchestrator wired to in-memory collaborators."""

    clock: FixedClock
    job_repo: InMemoryJobRepository
    user_repo: InMemoryUserRepository
    assignment_repo: InMemoryAssignmentRepository
    blacklist_repo: InMemoryBlacklistRepository
    language_repo: InMemoryLanguageRepository
    channel: MockChannel
    transaction: RecordingTransaction
    ledger: AssignmentLedger
    state_machine: JobStateMachine
    matching_engine: TranslatorMatchingEngine
    dispatcher: NotificationDispatcher
    orchestrator: BookingOrchestrator
    users: UserFactory

    def add_job(self, customer: User, **overrides) -> Job:
        """Store a job directly, bypassing the create use case."""
        now = self.clock.now()
        fields = dict(
            user_id=customer.id,
            from_language_id=SWEDISH,
            duration=60,
            due=now + timedelta(hours=48),
            customer_phone_type=True,
            created_at=now,
        )
        fields.update(overrides)
        if "will_expire_at" not in fields:
            fields["will_expire_at"] = will_expire_at(fields["due"], fields["created_at"])
        job = Job(**fields)
        self.job_repo.jobs[job.id] = copy.deepcopy(job)
        return job

    def assign(self, job: Job, translator: User, status: JobStatus = JobStatus.ASSIGNED) -> Assignment:
        """Bind a translator directly and move the stored job to ``status``."""
        assignment = Assignment(
            job_id=job.id, translator_id=translator.id, created_at=self.clock.now()
        )
        self.assignment_repo.rows.append(assignment)
        self.job_repo.jobs[job.id].status = status
        job.status = status
        return assignment

    def stored_job(self, job_id: UUID) -> Job:
        return self.job_repo.stored(job_id)


def build_harness(clock: Optional[FixedClock] = None) -> BookingHarness:
    clock = clock or FixedClock()
    job_repo = InMemoryJobRepository()
    user_repo = InMemoryUserRepository()
    assignment_repo = InMemoryAssignmentRepository(job_repo)
    blacklist_repo = InMemoryBlacklistRepository()
    language_repo = InMemoryLanguageRepository()
    channel = MockChannel()
    transaction = RecordingTransaction()

    ledger = AssignmentLedger(job_repo, assignment_repo, user_repo, InMemoryJobLock(), clock)
    state_machine = JobStateMachine()
    matching_engine = TranslatorMatchingEngine(user_repo, job_repo, blacklist_repo)
    dispatcher = NotificationDispatcher(
        channel,
        clock,
        language_repo,
        night_window=NightWindow(22, 7, "UTC"),
        templates=MessageTemplates("en", "UTC"),
    )
    orchestrator = BookingOrchestrator(
        job_repo,
        user_repo,
        ledger,
        state_machine,
        matching_engine,
        dispatcher,
        transaction,
        clock,
    )
    return BookingHarness(
        clock=clock,
        job_repo=job_repo,
        user_repo=user_repo,
        assignment_repo=assignment_repo,
        blacklist_repo=blacklist_repo,
        language_repo=language_repo,
        channel=channel,
        transaction=transaction,
        ledger=ledger,
        state_machine=state_machine,
        matching_engine=matching_engine,
        dispatcher=dispatcher,
        orchestrator=orchestrator,
        users=UserFactory(user_repo),
    )


@pytest.fixture
def test_settings():
    """Test settings configuration."""
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=TEST_DATABASE_URL,
        REDIS_URL="redis://localhost:6379/1",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        MOCK_CHANNELS=True,
        NOTIFICATION_TIMEZONE="UTC",
    )


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def harness(clock):
    """Booking orchestrator over in-memory repositories and a recording channel."""
    return build_harness(clock)


@pytest.fixture
def users(harness):
    return harness.users


@pytest_asyncio.fixture
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_factory() as session:
        yield session
        await session.rollback()
