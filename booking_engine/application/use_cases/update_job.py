"""Administrative booking edit use case."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from booking_engine.application.services.job_state_machine import AdminEdit, Parties
from booking_engine.application.services.notification_dispatcher import DispatchReport
from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.events.change_record import ChangeRecord
from booking_engine.domain.exceptions.validation_error import ValidationFailedError
from booking_engine.domain.value_objects.job_status import JobStatus

logger = get_logger(__name__)


@dataclass
class UpdateJobRequest:
    """Fields submitted on the admin booking form."""

    job_id: UUID
    editor_id: UUID
    status: Optional[JobStatus] = None
    due: Optional[datetime] = None
    from_language_id: Optional[int] = None
    admin_comments: Optional[str] = None
    session_time: Optional[str] = None
    reference: Optional[str] = None
    translator_id: Optional[UUID] = None
    translator_email: Optional[str] = None
    flagged: Optional[bool] = None
    manually_handled: Optional[bool] = None


@dataclass
class UpdateJobResult:
    job: Job
    changes: List[ChangeRecord]
    report: DispatchReport


class UpdateJobUseCase(BookingUseCase):
    """Use case applying an administrator's edit to a booking."""

    async def execute(self, request: UpdateJobRequest) -> UpdateJobResult:
        now = self._now()
        editor = await self._load_user(request.editor_id, "Editor")
        if not editor.is_admin():
            raise ValidationFailedError("Only administrators can edit bookings", "editor_id")

        job = await self._load_job(request.job_id)
        customer = await self._load_user(job.user_id, "Customer")
        current_translator = await self.ledger.current_translator(job.id)

        new_translator = None
        if request.translator_id or request.translator_email:
            new_translator = await self.ledger.resolve_translator(
                request.translator_id, request.translator_email
            )

        edit = AdminEdit(
            editor=editor,
            status=request.status,
            due=request.due,
            from_language_id=request.from_language_id,
            admin_comments=request.admin_comments,
            session_time=request.session_time,
            reference=request.reference,
            flagged=request.flagged,
            manually_handled=request.manually_handled,
        )
        parties = Parties(
            customer=customer, translator=current_translator, new_translator=new_translator
        )

        outcome = self.state_machine.plan_admin_edit(job, edit, parties, now)
        report = await self._commit_transition(job, outcome, actor=editor)

        logger.info(
            "Booking updated by administrator",
            job_id=str(job.id),
            editor_id=str(editor.id),
            changes=len(outcome.changes),
            notifications=len(outcome.intents),
        )
        return UpdateJobResult(job=job, changes=outcome.changes, report=report)
