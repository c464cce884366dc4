"""
Unit tests for the notification dispatcher and message templates.
"""

from datetime import datetime, timedelta, timezone

import pytest

from booking_engine.application.interfaces.channels import DeliveryResult
from booking_engine.application.services.message_templates import MessageTemplates
from booking_engine.domain.events.notification_intent import NotificationIntent
from booking_engine.domain.exceptions.delivery_error import DeliveryFailedError
from booking_engine.domain.value_objects.notification_type import (
    Channel,
    NotificationType,
)
from booking_engine.infrastructure.channels.mock import MockChannel

from conftest import FixedClock, build_harness

LATE_EVENING = datetime(2024, 1, 1, 23, 0, tzinfo=timezone.utc)


def intent(notification_type, channel, recipients, job, send_at=None, **context):
    return NotificationIntent(
        notification_type=notification_type,
        channel=channel,
        recipients=tuple(recipients),
        job=job,
        context=context,
        send_at=send_at,
    )


class FailingChannel(MockChannel):
    """Rejects pushes outright and reports SMS as undelivered."""

    async def send_push(self, recipients, payload, send_after=None):
        raise DeliveryFailedError("push", ",".join(recipients), "provider unavailable")

    async def send_sms(self, recipient, message):
        return DeliveryResult(success=False, channel="sms", error_message="invalid number")


class TestNotificationDispatcherPush:
    """Test opt-outs and the night window for push messages."""

    @pytest.fixture
    def night(self):
        return build_harness(FixedClock(LATE_EVENING))

    @pytest.mark.asyncio
    async def test_daytime_push_goes_out_now(self, harness, users):
        job = harness.add_job(users.customer())
        translators = [users.translator(), users.translator()]

        report = await harness.dispatcher.dispatch(
            [intent(NotificationType.SUITABLE_JOB, Channel.PUSH, translators, job)]
        )

        assert report.ok
        assert report.attempted == report.delivered == 2
        [message] = harness.channel.by_channel("push")
        assert message.recipients == [t.email for t in translators]
        assert message.send_after is None
        assert message.extra["sound"] == "normal_booking"
        assert "Swedish" in message.body.contents["en"]

    @pytest.mark.asyncio
    async def test_opt_outs_are_skipped(self, harness, users):
        job = harness.add_job(users.customer(), immediate=True)
        muted = users.translator(preferences={"not_get_notification": True})
        no_emergencies = users.translator(preferences={"not_get_emergency": True})
        no_email = users.translator(email=None)
        regular = users.translator()

        report = await harness.dispatcher.dispatch(
            [
                intent(
                    NotificationType.SUITABLE_JOB,
                    Channel.PUSH,
                    [muted, no_emergencies, no_email, regular],
                    job,
                )
            ]
        )

        assert report.skipped == [
            (muted.id, "not_get_notification"),
            (no_emergencies.id, "not_get_emergency"),
            (no_email.id, "no_push_tag"),
        ]
        [message] = harness.channel.by_channel("push")
        assert message.recipients == [regular.email]
        assert message.extra["sound"] == "emergency_booking"

    @pytest.mark.asyncio
    async def test_night_push_delayed_for_opted_out_recipients(self, night):
        job = night.add_job(night.users.customer())
        sleeper = night.users.translator(preferences={"not_get_nighttime": True})
        night_owl = night.users.translator()

        report = await night.dispatcher.dispatch(
            [intent(NotificationType.SUITABLE_JOB, Channel.PUSH, [sleeper, night_owl], job)]
        )

        assert report.delayed == 1
        assert report.delivered == 2
        now_message, later_message = night.channel.by_channel("push")
        assert now_message.recipients == [night_owl.email]
        assert now_message.send_after is None
        assert later_message.recipients == [sleeper.email]
        assert later_message.send_after == datetime(2024, 1, 2, 7, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_immediate_job_is_never_delayed(self, night):
        job = night.add_job(night.users.customer(), immediate=True)
        sleeper = night.users.translator(preferences={"not_get_nighttime": True})

        report = await night.dispatcher.dispatch(
            [intent(NotificationType.SUITABLE_JOB, Channel.PUSH, [sleeper], job)]
        )

        assert report.delayed == 0
        assert night.channel.by_channel("push")[0].send_after is None

    @pytest.mark.asyncio
    async def test_reminder_not_held_past_session(self, night):
        now = night.clock.now()
        job = night.add_job(night.users.customer(), due=now + timedelta(hours=1, minutes=30))
        sleeper = night.users.translator(preferences={"not_get_nighttime": True})
        remind_at = now + timedelta(minutes=30)

        report = await night.dispatcher.dispatch(
            [
                intent(
                    NotificationType.SESSION_START_REMIND,
                    Channel.PUSH,
                    [sleeper],
                    job,
                    send_at=remind_at,
                )
            ]
        )

        assert report.delayed == 0
        assert night.channel.by_channel("push")[0].send_after == remind_at

    @pytest.mark.asyncio
    async def test_reminder_delayed_when_session_is_after_night(self, night):
        job = night.add_job(night.users.customer())
        sleeper = night.users.translator(preferences={"not_get_nighttime": True})

        report = await night.dispatcher.dispatch(
            [intent(NotificationType.SESSION_START_REMIND, Channel.PUSH, [sleeper], job)]
        )

        assert report.delayed == 1
        assert night.channel.by_channel("push")[0].send_after == datetime(
            2024, 1, 2, 7, 0, tzinfo=timezone.utc
        )

    @pytest.mark.asyncio
    async def test_push_failure_is_reported(self, harness, users):
        harness.dispatcher.channel = FailingChannel()
        job = harness.add_job(users.customer())
        translator = users.translator()

        report = await harness.dispatcher.dispatch(
            [intent(NotificationType.SUITABLE_JOB, Channel.PUSH, [translator], job)]
        )

        assert report.ok is False
        assert report.delivered == 0
        [failure] = report.failures
        assert failure.channel == "push"
        assert failure.recipient_ids == [translator.id]
        assert "provider unavailable" in failure.error


class TestNotificationDispatcherSmsAndEmail:
    @pytest.mark.asyncio
    async def test_sms(self, harness, users):
        job = harness.add_job(users.customer())
        with_mobile = users.translator()
        without_mobile = users.translator(mobile=None)

        report = await harness.dispatcher.dispatch(
            [intent(NotificationType.SUITABLE_JOB, Channel.SMS, [with_mobile, without_mobile], job)]
        )

        assert report.skipped == [(without_mobile.id, "no_mobile")]
        [message] = harness.channel.by_channel("sms")
        assert message.recipients == [with_mobile.mobile]
        assert "phone interpretation" in message.body

    @pytest.mark.asyncio
    async def test_sms_failure_does_not_stop_other_recipients(self, harness, users):
        harness.dispatcher.channel = FailingChannel()
        job = harness.add_job(users.customer())
        translators = [users.translator(), users.translator()]

        report = await harness.dispatcher.dispatch(
            [intent(NotificationType.SUITABLE_JOB, Channel.SMS, translators, job)]
        )

        assert report.attempted == 2
        assert [f.error for f in report.failures] == ["invalid number", "invalid number"]

    @pytest.mark.asyncio
    async def test_email_uses_booking_address_for_customer(self, harness, users):
        customer = users.customer()
        translator = users.translator()
        job = harness.add_job(customer, user_email="bookings@clinic.example")

        await harness.dispatcher.dispatch(
            [
                intent(NotificationType.JOB_ACCEPTED, Channel.EMAIL, [customer], job),
                intent(NotificationType.ASSIGNMENT_CONFIRMED, Channel.EMAIL, [translator], job),
            ]
        )

        accepted, confirmed = harness.channel.by_channel("email")
        assert accepted.recipients == ["bookings@clinic.example"]
        assert accepted.extra["template"] == "emails.job-accepted"
        assert accepted.extra["language"] == "Swedish"
        assert accepted.extra["user_name"] == customer.name
        assert confirmed.recipients == [translator.email]
        assert confirmed.extra["template"] == "emails.job-assigned-translator"

    @pytest.mark.asyncio
    async def test_email_without_address_is_skipped(self, harness, users):
        customer = users.customer(email=None)
        job = harness.add_job(customer)

        report = await harness.dispatcher.dispatch(
            [intent(NotificationType.JOB_REOPENED, Channel.EMAIL, [customer], job)]
        )

        assert report.skipped == [(customer.id, "no_email")]
        assert harness.channel.sent == []


class TestMessageTemplates:
    """Test rendered texts."""

    @pytest.fixture
    def templates(self):
        return MessageTemplates("en", "UTC")

    def test_suitable_job_push(self, templates, harness, users):
        job = harness.add_job(users.customer())
        text = templates.push_text(NotificationType.SUITABLE_JOB, job, "Swedish", {})
        assert text == "New booking for Swedish interpreter 60min 03.01.2024 10:00"

    def test_emergency_push(self, templates, harness, users):
        job = harness.add_job(users.customer(), immediate=True)
        text = templates.push_text(NotificationType.SUITABLE_JOB, job, "Arabic", {})
        assert text == "New emergency booking for Arabic interpreter 60min"

    def test_cancel_push_depends_on_who_cancelled(self, templates, harness, users):
        job = harness.add_job(users.customer())
        by_translator = templates.push_text(
            NotificationType.JOB_CANCELLED, job, "Swedish", {"cancelled_by": "translator"}
        )
        by_customer = templates.push_text(
            NotificationType.JOB_CANCELLED, job, "Swedish", {"cancelled_by": "customer"}
        )
        assert "new interpreter" in by_translator
        assert by_customer.startswith("The customer has cancelled")

    def test_push_contents_are_locale_tagged(self, harness, users):
        job = harness.add_job(users.customer())
        contents = MessageTemplates("sv", "UTC").push_contents(
            NotificationType.JOB_EXPIRED, job, "Swedish"
        )
        assert list(contents) == ["sv"]

    def test_email_only_types_have_no_push_text(self, templates, harness, users):
        job = harness.add_job(users.customer())
        with pytest.raises(ValueError):
            templates.push_text(NotificationType.STATUS_CHANGED, job, "Swedish", {})

    def test_physical_sms_mentions_town(self, templates, harness, users):
        job = harness.add_job(
            users.customer(), customer_phone_type=False, customer_physical_type=True, town="Uppsala"
        )
        assert "in Uppsala" in templates.sms_text(job, "Swedish")

    def test_mixed_booking_sms_uses_phone_text(self, templates, harness, users):
        job = harness.add_job(users.customer(), customer_physical_type=True, town="Uppsala")
        assert "phone interpretation" in templates.sms_text(job, "Swedish")

    def test_translator_change_envelope(self, templates, harness, users):
        job = harness.add_job(users.customer())
        envelope = templates.email_envelope(
            NotificationType.JOB_CHANGED_TRANSLATOR, job, {"audience": "old-translator"}
        )
        assert envelope.template == "emails.job-changed-translator-old-translator"
        assert str(job.id) in envelope.subject

    def test_push_only_types_have_no_email(self, templates, harness, users):
        job = harness.add_job(users.customer())
        with pytest.raises(ValueError):
            templates.email_envelope(NotificationType.SUITABLE_JOB, job)

    def test_format_due_in_local_time(self, harness, users):
        job = harness.add_job(users.customer())
        assert MessageTemplates("sv", "Europe/Stockholm").format_due(job) == "03.01.2024 11:00"
