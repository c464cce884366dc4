"""
Booking Orchestrator: single entry point over the booking use cases.
"""

from typing import List, Optional
from uuid import UUID

from booking_engine.application.interfaces.repositories import (
    JobRepositoryInterface,
    UserRepositoryInterface,
)
from booking_engine.application.interfaces.services import (
    ClockInterface,
    TransactionInterface,
)
from booking_engine.application.services.assignment_ledger import AssignmentLedger
from booking_engine.application.services.job_state_machine import JobStateMachine
from booking_engine.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from booking_engine.application.services.translator_matching_engine import (
    TranslatorMatchingEngine,
)
from booking_engine.application.use_cases.accept_job import (
    AcceptJobRequest,
    AcceptJobResult,
    AcceptJobUseCase,
)
from booking_engine.application.use_cases.cancel_job import (
    CancelJobRequest,
    CancelJobResult,
    CancelJobUseCase,
)
from booking_engine.application.use_cases.create_job import (
    CreateJobRequest,
    CreateJobResult,
    CreateJobUseCase,
)
from booking_engine.application.use_cases.customer_not_call import (
    CustomerNotCallRequest,
    CustomerNotCallResult,
    CustomerNotCallUseCase,
)
from booking_engine.application.use_cases.end_job import (
    EndJobRequest,
    EndJobResult,
    EndJobUseCase,
)
from booking_engine.application.use_cases.expire_pending_jobs import (
    ExpirePendingJobsUseCase,
    SweepResult,
)
from booking_engine.application.use_cases.get_potential_jobs import (
    GetPotentialJobsUseCase,
)
from booking_engine.application.use_cases.get_user_jobs import (
    GetUserJobsUseCase,
    UserJobsResult,
)
from booking_engine.application.use_cases.reopen_job import (
    ReopenJobRequest,
    ReopenJobResult,
    ReopenJobUseCase,
)
from booking_engine.application.use_cases.resend_notifications import (
    ResendNotificationsResult,
    ResendNotificationsUseCase,
)
from booking_engine.application.use_cases.start_due_sessions import (
    StartDueSessionsUseCase,
)
from booking_engine.application.use_cases.update_job import (
    UpdateJobRequest,
    UpdateJobResult,
    UpdateJobUseCase,
)
from booking_engine.domain.entities.assignment import Assignment
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.booking_error import NotFoundError
from booking_engine.domain.value_objects.notification_type import Channel


class BookingOrchestrator:
    """
    Sequences the lifecycle components for every booking use case.

    All use cases share one set of collaborators, so a request sees a single
    repository session, lock and dispatcher.
    """

    def __init__(
        self,
        job_repo: JobRepositoryInterface,
        user_repo: UserRepositoryInterface,
        ledger: AssignmentLedger,
        state_machine: JobStateMachine,
        matching_engine: TranslatorMatchingEngine,
        dispatcher: NotificationDispatcher,
        transaction: TransactionInterface,
        clock: ClockInterface,
        immediate_lead_minutes: int = 5,
    ):
        components = (
            job_repo,
            user_repo,
            ledger,
            state_machine,
            matching_engine,
            dispatcher,
            transaction,
            clock,
        )
        self.job_repo = job_repo
        self.ledger = ledger
        self._create = CreateJobUseCase(
            *components, immediate_lead_minutes=immediate_lead_minutes
        )
        self._accept = AcceptJobUseCase(*components)
        self._cancel = CancelJobUseCase(*components)
        self._end = EndJobUseCase(*components)
        self._customer_not_call = CustomerNotCallUseCase(*components)
        self._reopen = ReopenJobUseCase(*components)
        self._update = UpdateJobUseCase(*components)
        self._potential_jobs = GetPotentialJobsUseCase(*components)
        self._user_jobs = GetUserJobsUseCase(*components)
        self._resend = ResendNotificationsUseCase(*components)
        self._expire = ExpirePendingJobsUseCase(*components)
        self._start = StartDueSessionsUseCase(*components)

    async def create_job(self, request: CreateJobRequest) -> CreateJobResult:
        return await self._create.execute(request)

    async def accept_job(self, request: AcceptJobRequest) -> AcceptJobResult:
        return await self._accept.execute(request)

    async def cancel_job(self, request: CancelJobRequest) -> CancelJobResult:
        return await self._cancel.execute(request)

    async def end_job(self, request: EndJobRequest) -> EndJobResult:
        return await self._end.execute(request)

    async def customer_not_call(
        self, request: CustomerNotCallRequest
    ) -> CustomerNotCallResult:
        return await self._customer_not_call.execute(request)

    async def reopen_job(self, request: ReopenJobRequest) -> ReopenJobResult:
        return await self._reopen.execute(request)

    async def update_job(self, request: UpdateJobRequest) -> UpdateJobResult:
        return await self._update.execute(request)

    async def potential_jobs(self, translator_id: UUID, limit: int = 100) -> List[Job]:
        return await self._potential_jobs.execute(translator_id, limit)

    async def user_jobs(
        self, user_id: UUID, history: bool = False, page: int = 1, per_page: int = 15
    ) -> UserJobsResult:
        return await self._user_jobs.execute(user_id, history, page, per_page)

    async def resend_notifications(
        self, job_id: UUID, channel: Channel = Channel.PUSH
    ) -> ResendNotificationsResult:
        return await self._resend.execute(job_id, channel)

    async def expire_pending_jobs(self, limit: int = 100) -> SweepResult:
        return await self._expire.execute(limit)

    async def start_due_sessions(self, limit: int = 100) -> SweepResult:
        return await self._start.execute(limit)

    async def get_job(self, job_id: UUID) -> Job:
        job = await self.job_repo.get_by_id(job_id)
        if not job:
            raise NotFoundError("Job", job_id)
        return job

    async def assignment_history(self, job_id: UUID) -> List[Assignment]:
        return await self.ledger.history(job_id)

    async def current_assignment(self, job_id: UUID) -> Optional[Assignment]:
        return await self.ledger.current(job_id)
