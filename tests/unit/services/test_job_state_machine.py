"""
Unit tests for the job status state machine.
"""

from datetime import timedelta

import pytest

from booking_engine.application.services.job_state_machine import (
    AdminEdit,
    JobStateMachine,
    Parties,
)
from booking_engine.domain.events.transition_outcome import AssignmentAction
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

from conftest import ARABIC


def kinds(outcome):
    return [(i.notification_type, i.channel) for i in outcome.intents]


class TestJobStateMachineLifecycle:
    """Test the customer and translator driven transitions."""

    @pytest.fixture
    def machine(self):
        return JobStateMachine()

    @pytest.fixture
    def customer(self, users):
        return users.customer()

    @pytest.fixture
    def translator(self, users):
        return users.translator()

    def test_accept(self, machine, harness, customer, translator):
        job = harness.add_job(customer)
        now = harness.clock.now()

        outcome = machine.plan_accept(job, translator, customer, now)

        assert outcome.new_status == JobStatus.ASSIGNED
        assert outcome.assignment_action == AssignmentAction.BIND
        assert outcome.translator_id == translator.id
        assert kinds(outcome) == [
            (NotificationType.JOB_ACCEPTED, Channel.PUSH),
            (NotificationType.JOB_ACCEPTED, Channel.EMAIL),
            (NotificationType.ASSIGNMENT_CONFIRMED, Channel.EMAIL),
            (NotificationType.SESSION_START_REMIND, Channel.PUSH),
            (NotificationType.SESSION_START_REMIND, Channel.PUSH),
        ]
        reminders = outcome.intents[3:]
        assert [r.recipients[0].id for r in reminders] == [customer.id, translator.id]
        assert all(r.send_at == job.due - timedelta(minutes=60) for r in reminders)

    def test_reminder_for_imminent_session_is_sent_now(self, machine, harness, customer):
        job = harness.add_job(customer, due=harness.clock.now() + timedelta(minutes=30))

        reminders = machine.session_reminders(job, [customer], harness.clock.now())

        assert reminders[0].send_at is None

    def test_accept_rejects_non_pending(self, machine, harness, customer, translator):
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)
        with pytest.raises(JobNotAcceptableError):
            machine.plan_accept(job, translator, customer, harness.clock.now())

    def test_expire(self, machine, harness, customer):
        job = harness.add_job(customer)
        now = harness.clock.advance(hours=17)

        outcome = machine.plan_expire(job, customer, now)

        assert outcome.new_status == JobStatus.TIMEDOUT
        assert kinds(outcome) == [(NotificationType.JOB_EXPIRED, Channel.PUSH)]

    def test_expire_before_expiry_time(self, machine, harness, customer):
        job = harness.add_job(customer)
        with pytest.raises(InvalidTransitionError):
            machine.plan_expire(job, customer, harness.clock.now())

    def test_customer_cancel_exactly_one_day_ahead(self, machine, harness, customer, translator):
        now = harness.clock.now()
        job = harness.add_job(customer, due=now + timedelta(hours=24), status=JobStatus.ASSIGNED)

        outcome = machine.plan_customer_cancel(job, customer, translator, now)

        assert outcome.new_status == JobStatus.WITHDRAWBEFORE24
        assert outcome.updates["withdraw_at"] == now
        assert outcome.assignment_action == AssignmentAction.RELEASE
        assert kinds(outcome) == [(NotificationType.JOB_CANCELLED, Channel.PUSH)]
        assert outcome.intents[0].recipients[0].id == translator.id
        assert outcome.intents[0].context["cancelled_by"] == "customer"

    def test_customer_cancel_late(self, machine, harness, customer, translator):
        now = harness.clock.now()
        job = harness.add_job(
            customer, due=now + timedelta(hours=23, minutes=59), status=JobStatus.ASSIGNED
        )

        outcome = machine.plan_customer_cancel(job, customer, translator, now)

        assert outcome.new_status == JobStatus.WITHDRAWAFTER24

    def test_customer_cancel_pending_job(self, machine, harness, customer):
        job = harness.add_job(customer)

        outcome = machine.plan_customer_cancel(job, customer, None, harness.clock.now())

        assert outcome.new_status == JobStatus.WITHDRAWBEFORE24
        assert outcome.assignment_action == AssignmentAction.NONE
        assert outcome.intents == []

    def test_customer_cancel_closed_job(self, machine, harness, customer):
        job = harness.add_job(customer, status=JobStatus.COMPLETED)
        with pytest.raises(InvalidTransitionError):
            machine.plan_customer_cancel(job, customer, None, harness.clock.now())

    def test_translator_cancel(self, machine, harness, customer, translator):
        now = harness.clock.now()
        job = harness.add_job(customer, due=now + timedelta(hours=25), status=JobStatus.ASSIGNED)

        outcome = machine.plan_translator_cancel(job, translator, customer, now)

        assert outcome.new_status == JobStatus.PENDING
        assert outcome.assignment_action == AssignmentAction.RELEASE
        assert outcome.rematch is True
        assert outcome.excluded_translator_ids == frozenset({translator.id})
        assert outcome.updates["created_at"] == now
        assert outcome.updates["will_expire_at"] == now + timedelta(hours=16)
        assert outcome.intents[0].recipients[0].id == customer.id
        assert outcome.intents[0].context["cancelled_by"] == "translator"

    def test_translator_cancel_within_one_day(self, machine, harness, customer, translator):
        now = harness.clock.now()
        job = harness.add_job(customer, due=now + timedelta(hours=24), status=JobStatus.ASSIGNED)

        with pytest.raises(InvalidTransitionError):
            machine.plan_translator_cancel(job, translator, customer, now)

    def test_start(self, machine, harness, customer):
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)

        with pytest.raises(InvalidTransitionError):
            machine.plan_start(job, harness.clock.now())

        outcome = machine.plan_start(job, job.due)
        assert outcome.new_status == JobStatus.STARTED
        assert outcome.intents == []

    def test_end_records_session_time(self, machine, harness, customer, translator):
        job = harness.add_job(customer, status=JobStatus.STARTED)
        now = job.due + timedelta(minutes=65)

        outcome = machine.plan_end(job, translator, customer, translator, now)

        assert outcome.new_status == JobStatus.COMPLETED
        assert outcome.updates == {"end_at": now, "session_time": "1:05:00"}
        assert outcome.assignment_action == AssignmentAction.COMPLETE
        assert outcome.translator_id == translator.id
        assert [(i.recipients[0].id, i.context["for_text"]) for i in outcome.intents] == [
            (customer.id, "invoice"),
            (translator.id, "payroll"),
        ]
        assert outcome.intents[0].context["session_time"] == "1h 05min"

    def test_end_requires_started(self, machine, harness, customer, translator):
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)
        with pytest.raises(InvalidTransitionError):
            machine.plan_end(job, customer, customer, translator, job.due)

    def test_customer_not_call(self, machine, harness, customer, translator):
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)

        outcome = machine.plan_customer_not_call(job, translator, job.due)

        assert outcome.new_status == JobStatus.NOT_CARRIED_OUT_CUSTOMER
        assert outcome.updates["end_at"] == job.due
        assert outcome.assignment_action == AssignmentAction.COMPLETE

        with pytest.raises(InvalidTransitionError):
            machine.plan_customer_not_call(
                harness.add_job(customer), translator, harness.clock.now()
            )

    def test_reopen(self, machine, harness, customer):
        job = harness.add_job(customer, status=JobStatus.WITHDRAWBEFORE24)
        now = harness.clock.now()

        outcome = machine.plan_reopen(job, customer, now)

        assert outcome.new_status == JobStatus.PENDING
        assert outcome.assignment_action == AssignmentAction.RELEASE
        assert outcome.rematch is True
        assert outcome.updates["email_sent"] is False
        assert kinds(outcome) == [(NotificationType.JOB_REOPENED, Channel.EMAIL)]

    def test_reopen_pending_job(self, machine, harness, customer):
        with pytest.raises(InvalidTransitionError):
            machine.plan_reopen(harness.add_job(customer), customer, harness.clock.now())

    def test_reopened_copy(self, machine, harness, customer):
        job = harness.add_job(customer, status=JobStatus.TIMEDOUT, admin_comments="old")
        now = harness.clock.advance(hours=1)

        copy, intents = machine.reopened_copy(job, customer, now)

        assert copy.id != job.id
        assert copy.status == JobStatus.PENDING
        assert copy.reopened_from_id == job.id
        assert copy.created_at == now
        assert str(job.id) in copy.admin_comments
        assert copy.due == job.due
        assert job.status == JobStatus.TIMEDOUT
        assert intents[0].job is copy

    def test_reopened_copy_requires_timedout(self, machine, harness, customer):
        job = harness.add_job(customer, status=JobStatus.COMPLETED)
        with pytest.raises(InvalidTransitionError):
            machine.reopened_copy(job, customer, harness.clock.now())

    def test_suitable_job_intents(self, machine, harness, customer, users):
        job = harness.add_job(customer)
        translators = [users.translator(), users.translator()]

        assert machine.suitable_job_intents(job, []) == []
        with pytest.raises(ValueError):
            machine.suitable_job_intents(job, translators, Channel.EMAIL)

        intents = machine.suitable_job_intents(job, translators, Channel.SMS)
        assert len(intents) == 1
        assert intents[0].channel == Channel.SMS
        assert len(intents[0].recipients) == 2


class TestJobStateMachineAdminEdit:
    """Test the administrative edit path."""

    @pytest.fixture
    def machine(self):
        return JobStateMachine()

    @pytest.fixture
    def admin(self, users):
        return users.admin()

    @pytest.fixture
    def customer(self, users):
        return users.customer()

    def test_assign_pending_job(self, machine, harness, users, admin, customer):
        job = harness.add_job(customer)
        translator = users.translator()
        parties = Parties(customer, None, translator)

        outcome = machine.plan_admin_edit(
            job, AdminEdit(admin, status=JobStatus.ASSIGNED), parties, harness.clock.now()
        )

        assert outcome.new_status == JobStatus.ASSIGNED
        assert outcome.reassign_to_id == translator.id
        assert outcome.updates["by_admin"] is True
        assert [c.field for c in outcome.changes] == ["translator", "status"]
        changed = [
            i.context["audience"]
            for i in outcome.intents
            if i.notification_type == NotificationType.JOB_CHANGED_TRANSLATOR
        ]
        assert changed == ["customer", "new-translator"]

    def test_assign_without_translator(self, machine, harness, admin, customer):
        job = harness.add_job(customer)
        with pytest.raises(ValidationFailedError):
            machine.plan_admin_edit(
                job, AdminEdit(admin, status=JobStatus.ASSIGNED), Parties(customer), harness.clock.now()
            )

    def test_change_translator_on_pending_job_without_status(self, machine, harness, users, admin, customer):
        job = harness.add_job(customer)
        with pytest.raises(ValidationFailedError):
            machine.plan_admin_edit(
                job, AdminEdit(admin), Parties(customer, None, users.translator()), harness.clock.now()
            )

    def test_replace_translator_on_assigned_job(self, machine, harness, users, admin, customer):
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)
        old, new = users.translator(), users.translator()

        outcome = machine.plan_admin_edit(
            job, AdminEdit(admin), Parties(customer, old, new), harness.clock.now()
        )

        assert outcome.status_changed is False
        assert outcome.reassign_to_id == new.id
        assert [i.context["audience"] for i in outcome.intents] == [
            "customer",
            "old-translator",
            "new-translator",
        ]

    def test_complete_started_job(self, machine, harness, users, admin, customer):
        translator = users.translator()
        job = harness.add_job(customer, status=JobStatus.STARTED)
        edit = AdminEdit(
            admin, status=JobStatus.COMPLETED, admin_comments="closed by phone", session_time="1:30:00"
        )

        outcome = machine.plan_admin_edit(job, edit, Parties(customer, translator), harness.clock.now())

        assert outcome.new_status == JobStatus.COMPLETED
        assert outcome.updates["session_time"] == "1:30:00"
        assert outcome.updates["admin_comments"] == "closed by phone"
        assert outcome.assignment_action == AssignmentAction.COMPLETE
        assert outcome.translator_id == admin.id
        ended = [i for i in outcome.intents if i.notification_type == NotificationType.SESSION_ENDED]
        assert [i.context["for_text"] for i in ended] == ["invoice", "payroll"]

    def test_complete_requires_comment(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.STARTED)
        edit = AdminEdit(admin, status=JobStatus.COMPLETED, session_time="1:00:00")

        with pytest.raises(RequiredFieldError) as exc_info:
            machine.plan_admin_edit(job, edit, Parties(customer), harness.clock.now())
        assert exc_info.value.field_name == "admin_comments"

    def test_complete_requires_session_time(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.STARTED)
        edit = AdminEdit(admin, status=JobStatus.COMPLETED, admin_comments="done")

        with pytest.raises(RequiredFieldError) as exc_info:
            machine.plan_admin_edit(job, edit, Parties(customer), harness.clock.now())
        assert exc_info.value.field_name == "session_time"

    def test_flagging_requires_comment(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.COMPLETED)
        edit = AdminEdit(admin, flagged=True)

        with pytest.raises(RequiredFieldError) as exc_info:
            machine.plan_admin_edit(job, edit, Parties(customer), harness.clock.now())
        assert exc_info.value.field_name == "admin_comments"

    def test_session_flags_are_recorded(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.COMPLETED)
        edit = AdminEdit(
            admin, admin_comments="translator was late", flagged=True, manually_handled=True
        )

        outcome = machine.plan_admin_edit(job, edit, Parties(customer), harness.clock.now())

        assert outcome.status_changed is False
        assert outcome.updates["flagged"] is True
        assert outcome.updates["manually_handled"] is True
        assert [change.field for change in outcome.changes] == ["flagged", "manually_handled"]
        assert outcome.intents == []

    def test_unflagging_needs_no_comment(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.COMPLETED, flagged=True)

        outcome = machine.plan_admin_edit(
            job, AdminEdit(admin, flagged=False), Parties(customer), harness.clock.now()
        )

        assert outcome.updates["flagged"] is False

    def test_complete_rejects_malformed_session_time(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.STARTED)
        edit = AdminEdit(admin, status=JobStatus.COMPLETED, admin_comments="x", session_time="90min")

        with pytest.raises(ValidationFailedError) as exc_info:
            machine.plan_admin_edit(job, edit, Parties(customer), harness.clock.now())
        assert exc_info.value.field_name == "session_time"

    def test_correct_completed_to_timedout(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.COMPLETED)
        edit = AdminEdit(admin, status=JobStatus.TIMEDOUT, admin_comments="never happened")

        outcome = machine.plan_admin_edit(job, edit, Parties(customer), harness.clock.now())

        assert outcome.new_status == JobStatus.TIMEDOUT

    def test_withdrawn_before_day_cannot_be_edited(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.WITHDRAWBEFORE24)
        edit = AdminEdit(admin, status=JobStatus.TIMEDOUT, admin_comments="x")

        with pytest.raises(InvalidTransitionError):
            machine.plan_admin_edit(job, edit, Parties(customer), harness.clock.now())

    def test_assigned_cannot_be_started_by_admin(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)
        with pytest.raises(InvalidTransitionError):
            machine.plan_admin_edit(
                job, AdminEdit(admin, status=JobStatus.STARTED), Parties(customer), harness.clock.now()
            )

    def test_withdraw_assigned_job(self, machine, harness, users, admin, customer):
        translator = users.translator()
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)

        outcome = machine.plan_admin_edit(
            job,
            AdminEdit(admin, status=JobStatus.WITHDRAWBEFORE24),
            Parties(customer, translator),
            harness.clock.now(),
        )

        assert outcome.assignment_action == AssignmentAction.RELEASE
        assert outcome.updates["withdraw_at"] == harness.clock.now()
        assert kinds(outcome) == [
            (NotificationType.STATUS_CHANGED, Channel.EMAIL),
            (NotificationType.JOB_CANCELLED, Channel.EMAIL),
        ]

    def test_reopen_timedout_job_by_admin(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.TIMEDOUT)

        outcome = machine.plan_admin_edit(
            job, AdminEdit(admin, status=JobStatus.PENDING), Parties(customer), harness.clock.now()
        )

        assert outcome.new_status == JobStatus.PENDING
        assert outcome.rematch is True

    def test_due_change_notifies_both_parties(self, machine, harness, users, admin, customer):
        translator = users.translator()
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)
        new_due = job.due + timedelta(hours=2)

        outcome = machine.plan_admin_edit(
            job, AdminEdit(admin, due=new_due), Parties(customer, translator), harness.clock.now()
        )

        assert outcome.updates["due"] == new_due
        assert kinds(outcome) == [(NotificationType.JOB_CHANGED_DATE, Channel.EMAIL)]
        assert {u.id for u in outcome.intents[0].recipients} == {customer.id, translator.id}
        assert outcome.intents[0].context["new_due"] == new_due.isoformat()

    def test_language_change(self, machine, harness, admin, customer):
        job = harness.add_job(customer)

        outcome = machine.plan_admin_edit(
            job, AdminEdit(admin, from_language_id=ARABIC), Parties(customer), harness.clock.now()
        )

        assert outcome.updates["from_language_id"] == ARABIC
        assert kinds(outcome) == [(NotificationType.JOB_CHANGED_LANGUAGE, Channel.EMAIL)]

    def test_no_change_mails_for_past_sessions(self, machine, harness, admin, customer):
        job = harness.add_job(customer, status=JobStatus.ASSIGNED)
        past = harness.clock.now() - timedelta(hours=1)

        outcome = machine.plan_admin_edit(job, AdminEdit(admin, due=past), Parties(customer), harness.clock.now())

        assert outcome.updates["due"] == past
        assert outcome.intents == []
