"""
Job Status State Machine.

Every operation validates its guards and returns a TransitionOutcome
describing the status change, field updates, audit records and the
notifications it implies. Nothing is mutated here; callers apply the
outcome once the assignment ledger has committed its part.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple
from uuid import uuid4

from booking_engine.application.services.expiry_calculator import will_expire_at
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.events.change_record import ChangeRecord
from booking_engine.domain.events.notification_intent import NotificationIntent
from booking_engine.domain.events.transition_outcome import (
    AssignmentAction,
    TransitionOutcome,
)
from booking_engine.domain.exceptions.booking_error import (
    InvalidTransitionError,
    JobNotAcceptableError,
)
from booking_engine.domain.exceptions.validation_error import (
    RequiredFieldError,
    ValidationFailedError,
)
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.domain.value_objects.notification_type import (
    Channel,
    NotificationType,
)
from booking_engine.domain.value_objects.session_time import SessionTime

logger = get_logger(__name__)


@dataclass
class AdminEdit:
    """Fields an administrator submitted on the booking edit form."""

    editor: User
    status: Optional[JobStatus] = None
    due: Optional[datetime] = None
    from_language_id: Optional[int] = None
    admin_comments: Optional[str] = None
    session_time: Optional[str] = None
    reference: Optional[str] = None
    flagged: Optional[bool] = None
    manually_handled: Optional[bool] = None


@dataclass
class Parties:
    """People a transition may need to tell about."""

    customer: User
    translator: Optional[User] = None
    new_translator: Optional[User] = None

    @property
    def translator_changed(self) -> bool:
        if self.new_translator is None:
            return False
        return self.translator is None or self.translator.id != self.new_translator.id

    @property
    def bound_translator(self) -> Optional[User]:
        """Translator holding the job once the edit is applied."""
        if self.translator_changed:
            return self.new_translator
        return self.translator


class JobStateMachine:
    """Plans job status transitions."""

    def __init__(
        self,
        cancellation_window_hours: int = 24,
        reminder_lead_minutes: int = 60,
    ):
        self.cancellation_window = timedelta(hours=cancellation_window_hours)
        self.reminder_lead = timedelta(minutes=reminder_lead_minutes)

    # Translator and customer flows

    def plan_accept(
        self, job: Job, translator: User, customer: User, now: datetime
    ) -> TransitionOutcome:
        """pending -> assigned when a translator accepts."""
        if job.status != JobStatus.PENDING:
            raise JobNotAcceptableError(job.id, job.status)

        outcome = self._outcome(job, JobStatus.ASSIGNED, now)
        outcome.assignment_action = AssignmentAction.BIND
        outcome.translator_id = translator.id
        outcome.intents.extend(
            [
                self._intent(NotificationType.JOB_ACCEPTED, Channel.PUSH, [customer], job),
                self._intent(NotificationType.JOB_ACCEPTED, Channel.EMAIL, [customer], job),
                self._intent(
                    NotificationType.ASSIGNMENT_CONFIRMED, Channel.EMAIL, [translator], job
                ),
            ]
        )
        outcome.intents.extend(self.session_reminders(job, [customer, translator], now))
        return outcome

    def plan_expire(self, job: Job, customer: User, now: datetime) -> TransitionOutcome:
        """pending -> timedout once the expiry time has passed."""
        self._require_transition(job, JobStatus.TIMEDOUT)
        if job.status != JobStatus.PENDING:
            raise InvalidTransitionError(job.status, JobStatus.TIMEDOUT, "only pending jobs expire")
        if job.will_expire_at is None or job.will_expire_at > now:
            raise InvalidTransitionError(
                job.status, JobStatus.TIMEDOUT, "job has not reached its expiry time"
            )

        outcome = self._outcome(job, JobStatus.TIMEDOUT, now)
        outcome.intents.append(
            self._intent(NotificationType.JOB_EXPIRED, Channel.PUSH, [customer], job)
        )
        return outcome

    def plan_customer_cancel(
        self,
        job: Job,
        customer: User,
        translator: Optional[User],
        now: datetime,
    ) -> TransitionOutcome:
        """
        Customer withdraws the booking.

        A gap of at least the cancellation window until the session gives
        withdrawbefore24, anything shorter withdrawafter24.
        """
        if job.status not in [JobStatus.PENDING, JobStatus.ASSIGNED]:
            raise InvalidTransitionError(
                job.status, JobStatus.WITHDRAWBEFORE24, "only open bookings can be withdrawn"
            )

        if job.time_until_due(now) >= self.cancellation_window:
            target = JobStatus.WITHDRAWBEFORE24
        else:
            target = JobStatus.WITHDRAWAFTER24
        self._require_transition(job, target)

        outcome = self._outcome(job, target, now)
        outcome.updates["withdraw_at"] = now
        if translator:
            outcome.assignment_action = AssignmentAction.RELEASE
            outcome.intents.append(
                self._intent(
                    NotificationType.JOB_CANCELLED,
                    Channel.PUSH,
                    [translator],
                    job,
                    cancelled_by="customer",
                )
            )
        return outcome

    def plan_translator_cancel(
        self, job: Job, translator: User, customer: User, now: datetime
    ) -> TransitionOutcome:
        """assigned -> pending when the translator steps back well before the session."""
        if job.status != JobStatus.ASSIGNED:
            raise InvalidTransitionError(
                job.status, JobStatus.PENDING, "translator is not booked on this job"
            )
        if job.time_until_due(now) <= self.cancellation_window:
            raise InvalidTransitionError(
                job.status,
                JobStatus.PENDING,
                "translators can only cancel more than "
                f"{int(self.cancellation_window.total_seconds() // 3600)} hours before the session",
            )

        outcome = self._outcome(job, JobStatus.PENDING, now)
        outcome.updates.update(self._reopen_updates(job, now))
        outcome.assignment_action = AssignmentAction.RELEASE
        outcome.translator_id = translator.id
        outcome.rematch = True
        outcome.excluded_translator_ids = frozenset({translator.id})
        outcome.intents.append(
            self._intent(
                NotificationType.JOB_CANCELLED,
                Channel.PUSH,
                [customer],
                job,
                cancelled_by="translator",
            )
        )
        return outcome

    def plan_start(self, job: Job, now: datetime) -> TransitionOutcome:
        """assigned -> started once the session time has come."""
        self._require_transition(job, JobStatus.STARTED)
        if job.status != JobStatus.ASSIGNED:
            raise InvalidTransitionError(job.status, JobStatus.STARTED)
        if job.due > now:
            raise InvalidTransitionError(job.status, JobStatus.STARTED, "session is not due yet")
        return self._outcome(job, JobStatus.STARTED, now)

    def plan_end(
        self,
        job: Job,
        ended_by: User,
        customer: User,
        translator: User,
        now: datetime,
    ) -> TransitionOutcome:
        """started -> completed when one of the parties ends the session."""
        if job.status != JobStatus.STARTED:
            raise InvalidTransitionError(
                job.status, JobStatus.COMPLETED, "only started sessions can be ended"
            )

        session_time = SessionTime.from_interval(now - job.due)
        outcome = self._outcome(job, JobStatus.COMPLETED, now)
        outcome.updates.update({"end_at": now, "session_time": str(session_time)})
        outcome.assignment_action = AssignmentAction.COMPLETE
        outcome.translator_id = ended_by.id
        outcome.intents.extend(self._session_ended_intents(job, customer, translator, session_time))
        return outcome

    def plan_customer_not_call(
        self, job: Job, translator: User, now: datetime
    ) -> TransitionOutcome:
        """assigned|started -> not_carried_out_customer when the customer never showed up."""
        target = JobStatus.NOT_CARRIED_OUT_CUSTOMER
        if job.status not in [JobStatus.ASSIGNED, JobStatus.STARTED]:
            raise InvalidTransitionError(job.status, target)
        self._require_transition(job, target)

        outcome = self._outcome(job, target, now)
        outcome.updates["end_at"] = now
        outcome.assignment_action = AssignmentAction.COMPLETE
        outcome.translator_id = translator.id
        return outcome

    def plan_reopen(self, job: Job, customer: User, now: datetime) -> TransitionOutcome:
        """
        Reset a closed or stuck booking to pending on the same record.

        Reopening starts a new cycle rather than following the transition
        table, so any status except pending is accepted.
        """
        if job.status == JobStatus.PENDING:
            raise InvalidTransitionError(job.status, JobStatus.PENDING, "job is already open")

        outcome = self._outcome(job, JobStatus.PENDING, now)
        outcome.updates.update(self._reopen_updates(job, now))
        outcome.assignment_action = AssignmentAction.RELEASE
        outcome.rematch = True
        outcome.intents.append(
            self._intent(NotificationType.JOB_REOPENED, Channel.EMAIL, [customer], job)
        )
        return outcome

    def reopened_copy(
        self, job: Job, customer: User, now: datetime
    ) -> Tuple[Job, List[NotificationIntent]]:
        """
        Start a fresh cycle for a timed out booking as a new job.

        The original row keeps its timedout status for reporting; the copy
        links back to it through ``reopened_from_id``.
        """
        if job.status != JobStatus.TIMEDOUT:
            raise InvalidTransitionError(
                job.status, JobStatus.PENDING, "only timed out bookings are reopened as new jobs"
            )

        copy = replace(
            job,
            id=uuid4(),
            status=JobStatus.PENDING,
            created_at=now,
            updated_at=now,
            will_expire_at=will_expire_at(job.due, now),
            admin_comments=f"This booking is a reopening of booking #{job.id}",
            reopened_from_id=job.id,
            session_time=None,
            end_at=None,
            withdraw_at=None,
            email_sent=False,
            cust_16_hour_email=False,
            cust_48_hour_email=False,
        )
        intents = [
            self._intent(NotificationType.JOB_REOPENED, Channel.EMAIL, [customer], copy)
        ]
        return copy, intents

    # Administrative edit

    def plan_admin_edit(
        self, job: Job, edit: AdminEdit, parties: Parties, now: datetime
    ) -> TransitionOutcome:
        """
        Plan a free-form admin edit.

        The requested status is dispatched on the job's current status; date,
        language and translator changes produce change records and, while the
        session is still ahead, change e-mails.
        Flagging a session needs an admin comment.
        """
        if edit.flagged:
            self._require_comment(edit)

        target = edit.status or job.status
        outcome = self._outcome(job, target, now)

        if edit.status and edit.status != job.status:
            self._plan_admin_status(job, edit, parties, outcome, now)
        elif parties.translator_changed:
            if job.status not in [JobStatus.ASSIGNED, JobStatus.STARTED]:
                raise ValidationFailedError(
                    "A translator can only be changed on an assigned booking "
                    "or while assigning it",
                    "translator",
                )

        if parties.translator_changed:
            outcome.reassign_to_id = parties.new_translator.id
            outcome.changes.append(
                ChangeRecord(
                    "translator",
                    parties.translator.email if parties.translator else None,
                    parties.new_translator.email,
                )
            )

        new_due = job.due
        if edit.due is not None and edit.due != job.due:
            new_due = edit.due
            outcome.updates["due"] = edit.due
            outcome.changes.append(ChangeRecord("due", job.due, edit.due))
            if "will_expire_at" in outcome.updates:
                outcome.updates["will_expire_at"] = will_expire_at(
                    edit.due, outcome.updates["created_at"]
                )

        if edit.from_language_id is not None and edit.from_language_id != job.from_language_id:
            outcome.updates["from_language_id"] = edit.from_language_id
            outcome.changes.append(
                ChangeRecord("from_language_id", job.from_language_id, edit.from_language_id)
            )

        if outcome.status_changed:
            outcome.changes.append(ChangeRecord("status", job.status, outcome.new_status))
        if edit.admin_comments is not None:
            outcome.updates["admin_comments"] = edit.admin_comments
        if edit.reference is not None:
            outcome.updates["reference"] = edit.reference
        for name in ("flagged", "manually_handled"):
            value = getattr(edit, name)
            if value is not None and value != getattr(job, name):
                outcome.updates[name] = value
                outcome.changes.append(ChangeRecord(name, getattr(job, name), value))
        outcome.updates["by_admin"] = True

        if new_due is not None and new_due > now:
            outcome.intents.extend(self._change_intents(job, outcome, parties))

        logger.debug(
            "Admin edit planned",
            job_id=str(job.id),
            old_status=job.status.value,
            new_status=outcome.new_status.value,
            changed_fields=[change.field for change in outcome.changes],
        )
        return outcome

    def _plan_admin_status(
        self,
        job: Job,
        edit: AdminEdit,
        parties: Parties,
        outcome: TransitionOutcome,
        now: datetime,
    ) -> None:
        target = edit.status
        handlers = {
            JobStatus.TIMEDOUT: self._admin_from_timedout,
            JobStatus.COMPLETED: self._admin_from_closed,
            JobStatus.STARTED: self._admin_from_started,
            JobStatus.PENDING: self._admin_from_pending,
            JobStatus.WITHDRAWAFTER24: self._admin_from_closed,
            JobStatus.ASSIGNED: self._admin_from_assigned,
        }
        handler = handlers.get(job.status)
        if handler is None:
            raise InvalidTransitionError(job.status, target, "status cannot be edited")
        if not job.status.can_transition_to(target, by_admin=True):
            raise InvalidTransitionError(job.status, target)

        handler(job, edit, parties, outcome, now)

    def _admin_from_timedout(self, job, edit, parties, outcome, now) -> None:
        if edit.status == JobStatus.PENDING:
            outcome.updates.update(self._reopen_updates(job, now))
            outcome.assignment_action = AssignmentAction.RELEASE
            outcome.rematch = True
            outcome.intents.append(
                self._intent(
                    NotificationType.JOB_REOPENED, Channel.EMAIL, [parties.customer], job
                )
            )
            return

        if not parties.translator_changed:
            raise ValidationFailedError(
                "Assigning a timed out booking requires a translator", "translator"
            )
        outcome.intents.append(
            self._intent(NotificationType.JOB_ACCEPTED, Channel.EMAIL, [parties.customer], job)
        )

    def _admin_from_closed(self, job, edit, parties, outcome, now) -> None:
        # completed and withdrawafter24 can only be corrected to timedout
        self._require_comment(edit)

    def _admin_from_started(self, job, edit, parties, outcome, now) -> None:
        self._require_comment(edit)

        if edit.status == JobStatus.COMPLETED:
            if not edit.session_time:
                raise RequiredFieldError("session_time")
            try:
                session_time = SessionTime.parse(edit.session_time)
            except ValueError as e:
                raise ValidationFailedError(str(e), "session_time") from e

            outcome.updates.update({"end_at": now, "session_time": str(session_time)})
            outcome.assignment_action = AssignmentAction.COMPLETE
            outcome.translator_id = edit.editor.id
            outcome.intents.extend(
                self._session_ended_intents(
                    job, parties.customer, parties.bound_translator, session_time
                )
            )
        elif edit.status == JobStatus.NOT_CARRIED_OUT_CUSTOMER:
            outcome.updates["end_at"] = now
            outcome.assignment_action = AssignmentAction.COMPLETE
            outcome.translator_id = (
                parties.bound_translator.id if parties.bound_translator else edit.editor.id
            )
        else:
            outcome.assignment_action = AssignmentAction.RELEASE

    def _admin_from_pending(self, job, edit, parties, outcome, now) -> None:
        if edit.status == JobStatus.TIMEDOUT:
            self._require_comment(edit)

        if edit.status == JobStatus.ASSIGNED:
            if not parties.translator_changed:
                raise ValidationFailedError(
                    "Assigning a booking requires a translator", "translator"
                )
            translator = parties.new_translator
            outcome.intents.extend(
                [
                    self._intent(
                        NotificationType.JOB_ACCEPTED, Channel.EMAIL, [parties.customer], job
                    ),
                    self._intent(
                        NotificationType.ASSIGNMENT_CONFIRMED, Channel.EMAIL, [translator], job
                    ),
                ]
            )
            outcome.intents.extend(
                self.session_reminders(job, [parties.customer, translator], now)
            )
            return

        if edit.status.is_withdrawn():
            outcome.updates["withdraw_at"] = now
        outcome.intents.append(
            self._intent(
                NotificationType.STATUS_CHANGED,
                Channel.EMAIL,
                [parties.customer],
                job,
                new_status=edit.status.value,
            )
        )

    def _admin_from_assigned(self, job, edit, parties, outcome, now) -> None:
        if edit.status not in [
            JobStatus.WITHDRAWBEFORE24,
            JobStatus.WITHDRAWAFTER24,
            JobStatus.TIMEDOUT,
        ]:
            raise InvalidTransitionError(
                job.status, edit.status, "assigned bookings can only be withdrawn or timed out"
            )
        if edit.status == JobStatus.TIMEDOUT:
            self._require_comment(edit)

        outcome.assignment_action = AssignmentAction.RELEASE
        if edit.status.is_withdrawn():
            outcome.updates["withdraw_at"] = now
            outcome.intents.append(
                self._intent(
                    NotificationType.STATUS_CHANGED,
                    Channel.EMAIL,
                    [parties.customer],
                    job,
                    new_status=edit.status.value,
                )
            )
            if parties.translator:
                outcome.intents.append(
                    self._intent(
                        NotificationType.JOB_CANCELLED,
                        Channel.EMAIL,
                        [parties.translator],
                        job,
                        cancelled_by="admin",
                    )
                )

    # Notification helpers

    def session_reminders(
        self, job: Job, users: Sequence[User], now: datetime
    ) -> List[NotificationIntent]:
        """Session-start reminder pushes, scheduled a fixed lead before the session."""
        remind_at = job.due - self.reminder_lead
        send_at = remind_at if remind_at > now else None
        return [
            self._intent(
                NotificationType.SESSION_START_REMIND,
                Channel.PUSH,
                [user],
                job,
                send_at=send_at,
            )
            for user in users
        ]

    def booking_received_intents(self, job: Job, customer: User) -> List[NotificationIntent]:
        """Confirmation mail to the customer, sent to the booking's contact address when given."""
        return [self._intent(NotificationType.JOB_CREATED, Channel.EMAIL, [customer], job)]

    def suitable_job_intents(
        self, job: Job, translators: Sequence[User], channel: Channel = Channel.PUSH
    ) -> List[NotificationIntent]:
        """Offer the job to the given translators by push, or by SMS."""
        if not translators:
            return []
        if channel == Channel.EMAIL:
            raise ValueError("Jobs are offered by push or SMS only")
        return [self._intent(NotificationType.SUITABLE_JOB, channel, translators, job)]

    def _session_ended_intents(
        self,
        job: Job,
        customer: User,
        translator: Optional[User],
        session_time: SessionTime,
    ) -> List[NotificationIntent]:
        intents = [
            self._intent(
                NotificationType.SESSION_ENDED,
                Channel.EMAIL,
                [customer],
                job,
                session_time=session_time.display(),
                for_text="invoice",
            )
        ]
        if translator:
            intents.append(
                self._intent(
                    NotificationType.SESSION_ENDED,
                    Channel.EMAIL,
                    [translator],
                    job,
                    session_time=session_time.display(),
                    for_text="payroll",
                )
            )
        return intents

    def _change_intents(
        self, job: Job, outcome: TransitionOutcome, parties: Parties
    ) -> List[NotificationIntent]:
        intents = []
        translator = parties.bound_translator
        audience = [parties.customer] + ([translator] if translator else [])

        for change in outcome.changes:
            if change.field == "due":
                intents.append(
                    self._intent(
                        NotificationType.JOB_CHANGED_DATE,
                        Channel.EMAIL,
                        audience,
                        job,
                        old_due=change.old_value.isoformat() if change.old_value else None,
                        new_due=change.new_value.isoformat(),
                    )
                )
            elif change.field == "from_language_id":
                intents.append(
                    self._intent(
                        NotificationType.JOB_CHANGED_LANGUAGE,
                        Channel.EMAIL,
                        audience,
                        job,
                        old_language_id=change.old_value,
                        new_language_id=change.new_value,
                    )
                )
            elif change.field == "translator":
                recipients = [(parties.customer, "customer")]
                if parties.translator:
                    recipients.append((parties.translator, "old-translator"))
                recipients.append((parties.new_translator, "new-translator"))
                for user, role in recipients:
                    intents.append(
                        self._intent(
                            NotificationType.JOB_CHANGED_TRANSLATOR,
                            Channel.EMAIL,
                            [user],
                            job,
                            audience=role,
                        )
                    )
        return intents

    # Internals

    @staticmethod
    def _outcome(job: Job, target: JobStatus, now: datetime) -> TransitionOutcome:
        return TransitionOutcome(
            job_id=job.id, old_status=job.status, new_status=target, planned_at=now
        )

    @staticmethod
    def _intent(
        notification_type: NotificationType,
        channel: Channel,
        recipients: Sequence[User],
        job: Job,
        send_at: Optional[datetime] = None,
        **context,
    ) -> NotificationIntent:
        return NotificationIntent(
            notification_type=notification_type,
            channel=channel,
            recipients=tuple(recipients),
            job=job,
            context=context,
            send_at=send_at,
        )

    @staticmethod
    def _require_transition(job: Job, target: JobStatus) -> None:
        if not job.status.can_transition_to(target):
            raise InvalidTransitionError(job.status, target)

    @staticmethod
    def _require_comment(edit: AdminEdit) -> None:
        if not (edit.admin_comments or "").strip():
            raise RequiredFieldError("admin_comments")

    @staticmethod
    def _reopen_updates(job: Job, now: datetime) -> dict:
        return {
            "created_at": now,
            "will_expire_at": will_expire_at(job.due, now),
            "email_sent": False,
            "cust_16_hour_email": False,
            "cust_48_hour_email": False,
        }

