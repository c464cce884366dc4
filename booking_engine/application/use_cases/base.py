"""Shared plumbing for booking use cases."""

from datetime import datetime
from typing import FrozenSet, List, Optional
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
    DispatchReport,
    NotificationDispatcher,
)
from booking_engine.application.services.translator_matching_engine import (
    TranslatorMatchingEngine,
)
from booking_engine.config.logging import get_audit_logger, get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.events.notification_intent import NotificationIntent
from booking_engine.domain.events.transition_outcome import (
    AssignmentAction,
    TransitionOutcome,
)
from booking_engine.domain.exceptions.booking_error import (
    InvalidTransitionError,
    NotFoundError,
)
from booking_engine.domain.value_objects.notification_type import Channel
from booking_engine.infrastructure.monitoring.metrics import record_transition

logger = get_logger(__name__)
audit_logger = get_audit_logger()


class BookingUseCase:
    """Base class wiring the lifecycle components every booking use case needs."""

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
    ):
        self.job_repo = job_repo
        self.user_repo = user_repo
        self.ledger = ledger
        self.state_machine = state_machine
        self.matching_engine = matching_engine
        self.dispatcher = dispatcher
        self.transaction = transaction
        self.clock = clock

    async def _load_job(self, job_id: UUID) -> Job:
        job = await self.job_repo.get_by_id(job_id)
        if not job:
            raise NotFoundError("Job", job_id)
        return job

    async def _load_user(self, user_id: UUID, entity: str = "User") -> User:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(entity, user_id)
        return user

    async def _commit_transition(
        self, job: Job, outcome: TransitionOutcome, actor: Optional[User] = None
    ) -> DispatchReport:
        """
        Persist a planned transition, then dispatch its notifications.

        Storage changes (status compare-and-set, assignment bookkeeping, job
        fields) share one transaction; notifications go out only after it
        committed.
        """
        now = outcome.planned_at or self.clock.now()

        async def apply() -> None:
            if outcome.status_changed:
                won = await self.job_repo.compare_and_set_status(
                    job.id, outcome.old_status, outcome.new_status, now
                )
                if not won:
                    raise InvalidTransitionError(
                        outcome.old_status,
                        outcome.new_status,
                        "job was changed by another request",
                    )

            if outcome.reassign_to_id:
                await self.ledger.reassign(
                    job,
                    new_translator_id=outcome.reassign_to_id,
                    now=now,
                    due=outcome.updates.get("due", job.due),
                )

            if outcome.assignment_action == AssignmentAction.RELEASE:
                await self.ledger.release(job.id, now)
            elif outcome.assignment_action == AssignmentAction.COMPLETE:
                await self.ledger.complete_current(job.id, outcome.translator_id, now)

            job.apply(outcome)
            await self.job_repo.update(job)

        await self.transaction.execute_in_transaction(apply)

        if outcome.status_changed:
            record_transition(outcome.old_status.value, outcome.new_status.value)
        self._audit(job, outcome, actor)

        intents = list(outcome.intents)
        if outcome.rematch:
            intents.extend(
                await self._suitable_translator_intents(job, outcome.excluded_translator_ids)
            )
        return await self.dispatcher.dispatch(intents)

    async def _suitable_translator_intents(
        self,
        job: Job,
        exclude_translator_ids: FrozenSet[UUID] = frozenset(),
        channel: Channel = Channel.PUSH,
    ) -> List[NotificationIntent]:
        """Offer the job to every eligible translator not already booked at its time."""
        candidates = await self.matching_engine.find_potential_translators(
            job, exclude_translator_ids
        )
        translators = []
        for translator in candidates:
            if await self.ledger.is_translator_booked_at(translator.id, job.due, job.id):
                continue
            translators.append(translator)
        return self.state_machine.suitable_job_intents(job, translators, channel)

    def _audit(
        self, job: Job, outcome: TransitionOutcome, actor: Optional[User]
    ) -> None:
        actor_id = str(actor.id) if actor else None
        if outcome.status_changed:
            logger.info(
                "Job status changed",
                job_id=str(job.id),
                old_status=outcome.old_status.value,
                new_status=outcome.new_status.value,
                actor_id=actor_id,
            )
        for change in outcome.changes:
            audit_logger.info(
                "Job changed", job_id=str(job.id), actor_id=actor_id, **change.as_log_fields()
            )

    def _now(self) -> datetime:
        return self.clock.now()
