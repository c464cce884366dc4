"""
Message templates for booking notifications.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo

from booking_engine.domain.entities.job import Job
from booking_engine.domain.value_objects.notification_type import NotificationType
from booking_engine.domain.value_objects.session_time import format_minutes


@dataclass(frozen=True)
class EmailEnvelope:
    """Subject line and template name of a booking e-mail."""

    subject: str
    template: str


_EMAILS = {
    NotificationType.JOB_CREATED: (
        "We have received your interpreter booking (booking # {job_id})",
        "emails.job-created",
    ),
    NotificationType.JOB_ACCEPTED: (
        "Confirmation - an interpreter has accepted your booking (booking # {job_id})",
        "emails.job-accepted",
    ),
    NotificationType.ASSIGNMENT_CONFIRMED: (
        "Confirmation - you are booked for booking # {job_id}",
        "emails.job-assigned-translator",
    ),
    NotificationType.JOB_CANCELLED: (
        "Booking # {job_id} has been cancelled",
        "emails.job-cancelled",
    ),
    NotificationType.SESSION_ENDED: (
        "Information about the completed interpretation for booking # {job_id}",
        "emails.session-ended",
    ),
    NotificationType.JOB_REOPENED: (
        "Booking # {job_id} has been reopened",
        "emails.job-reopened",
    ),
    NotificationType.STATUS_CHANGED: (
        "Status update for booking # {job_id}",
        "emails.status-changed",
    ),
    NotificationType.JOB_CHANGED_DATE: (
        "Booking # {job_id} has been moved",
        "emails.job-changed-date",
    ),
    NotificationType.JOB_CHANGED_LANGUAGE: (
        "The language of booking # {job_id} has been changed",
        "emails.job-changed-lang",
    ),
    NotificationType.JOB_CHANGED_TRANSLATOR: (
        "The interpreter of booking # {job_id} has been changed",
        "emails.job-changed-translator-{audience}",
    ),
}


class MessageTemplates:
    """Renders push, SMS and e-mail texts for a job."""

    def __init__(self, locale: str = "en", tz_name: str = "UTC"):
        self.locale = locale
        self.tz = ZoneInfo(tz_name)

    def push_contents(
        self,
        notification_type: NotificationType,
        job: Job,
        language: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, str]:
        """Locale-tagged push body."""
        return {self.locale: self.push_text(notification_type, job, language, context or {})}

    def push_text(
        self,
        notification_type: NotificationType,
        job: Job,
        language: str,
        context: Dict[str, Any],
    ) -> str:
        date, time = self._local_date_time(job.due)
        duration = format_minutes(job.duration)

        if notification_type == NotificationType.SUITABLE_JOB:
            if job.immediate:
                return f"New emergency booking for {language} interpreter {job.duration}min"
            return f"New booking for {language} interpreter {job.duration}min {date} {time}"

        if notification_type == NotificationType.JOB_ACCEPTED:
            return (
                f"Your booking for a {language} interpreter on {date} at {time}, {duration}, "
                f"has been accepted. Booking # {job.id}"
            )

        if notification_type == NotificationType.JOB_CANCELLED:
            if context.get("cancelled_by") == "translator":
                return (
                    f"Your interpreter has cancelled the {language} booking on {date} at {time}. "
                    "We are looking for a new interpreter."
                )
            return f"The customer has cancelled the {language} booking on {date} at {time}."

        if notification_type == NotificationType.JOB_EXPIRED:
            return (
                f"Unfortunately no interpreter accepted your booking "
                f"({language}, {duration}, booking # {job.id})."
            )

        if notification_type == NotificationType.SESSION_START_REMIND:
            if job.is_phone_job():
                return (
                    f"Reminder: your {language} phone interpretation starts at {time} "
                    f"on {date} and lasts {duration}. Please check the booking details."
                )
            return (
                f"Reminder: your {language} interpretation in {job.town} starts at {time} "
                f"on {date} and lasts {duration}. Please check the booking details."
            )

        raise ValueError(f"No push template for notification type '{notification_type}'")

    def sms_text(self, job: Job, language: str) -> str:
        """SMS offering the job; mixed phone/physical bookings use the phone text."""
        date, time = self._local_date_time(job.due)
        duration = format_minutes(job.duration)

        if job.is_phone_job():
            return (
                f"New {language} phone interpretation on {date} at {time}, {duration}. "
                f"Booking # {job.id}. Accept it in the app."
            )
        return (
            f"New {language} interpretation in {job.town} on {date} at {time}, {duration}. "
            f"Booking # {job.id}. Accept it in the app."
        )

    def email_envelope(
        self,
        notification_type: NotificationType,
        job: Job,
        context: Optional[Dict[str, Any]] = None,
    ) -> EmailEnvelope:
        """Subject and template for a booking e-mail."""
        if notification_type not in _EMAILS:
            raise ValueError(f"No e-mail template for notification type '{notification_type}'")

        subject, template = _EMAILS[notification_type]
        context = context or {}
        return EmailEnvelope(
            subject=subject.format(job_id=job.id),
            template=template.format(audience=context.get("audience", "customer")),
        )

    def format_due(self, job: Job) -> str:
        date, time = self._local_date_time(job.due)
        return f"{date} {time}"

    def _local_date_time(self, instant: Optional[datetime]):
        if instant is None:
            return "", ""
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        local = instant.astimezone(self.tz)
        return local.strftime("%d.%m.%Y"), local.strftime("%H:%M")
