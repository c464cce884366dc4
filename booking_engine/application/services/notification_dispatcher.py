"""
Notification Dispatcher: turns notification intents into channel hand-offs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from booking_engine.application.interfaces.channels import (
    ChannelAdapterInterface,
    DeliveryResult,
    PushPayload,
)
from booking_engine.application.interfaces.repositories import (
    LanguageRepositoryInterface,
)
from booking_engine.application.interfaces.services import ClockInterface
from booking_engine.application.services.business_hours import NightWindow
from booking_engine.application.services.message_templates import MessageTemplates
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.events.notification_intent import NotificationIntent
from booking_engine.domain.exceptions.delivery_error import DeliveryFailedError
from booking_engine.domain.value_objects.notification_type import (
    Channel,
    NotificationType,
)
from booking_engine.infrastructure.monitoring.metrics import (
    record_delivery_failure,
    record_dispatch,
)

logger = get_logger(__name__)


@dataclass
class DeliveryFailure:
    """A hand-off that did not succeed."""

    notification_type: str
    channel: str
    recipient_ids: List[UUID]
    error: str


@dataclass
class DispatchReport:
    """What happened to a batch of intents."""

    attempted: int = 0
    delivered: int = 0
    delayed: int = 0
    skipped: List[Tuple[UUID, str]] = field(default_factory=list)
    failures: List[DeliveryFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def merge(self, other: "DispatchReport") -> "DispatchReport":
        self.attempted += other.attempted
        self.delivered += other.delivered
        self.delayed += other.delayed
        self.skipped.extend(other.skipped)
        self.failures.extend(other.failures)
        return self


class NotificationDispatcher:
    """Applies opt-outs and the night window, then hands messages to a channel adapter."""

    def __init__(
        self,
        channel: ChannelAdapterInterface,
        clock: ClockInterface,
        language_repo: LanguageRepositoryInterface,
        night_window: Optional[NightWindow] = None,
        templates: Optional[MessageTemplates] = None,
    ):
        self.channel = channel
        self.clock = clock
        self.language_repo = language_repo
        self.night_window = night_window or NightWindow()
        self.templates = templates or MessageTemplates()
        self.logger = logger

    async def dispatch(self, intents: Iterable[NotificationIntent]) -> DispatchReport:
        """
        Deliver every intent; channel failures are recorded, never raised.

        Args:
            intents: Intents produced by one accepted transition

        Returns:
            DispatchReport with counts, skipped recipients and failures
        """
        report = DispatchReport()
        languages: Dict[int, str] = {}

        for intent in intents:
            language = await self._language_name(intent.job, languages)
            if intent.channel == Channel.PUSH:
                await self._dispatch_push(intent, language, report)
            elif intent.channel == Channel.SMS:
                await self._dispatch_sms(intent, language, report)
            else:
                await self._dispatch_email(intent, language, report)

        if report.failures:
            self.logger.warning(
                "Notification dispatch finished with failures",
                attempted=report.attempted,
                failures=len(report.failures),
            )
        return report

    def split_push_recipients(
        self, intent: NotificationIntent, report: DispatchReport
    ) -> Tuple[List[User], List[User], datetime]:
        """
        Filter opted-out recipients and separate those whose push must wait.

        Returns:
            (send now, send later, instant the delayed group is released)
        """
        send_instant = intent.send_at or self.clock.now()
        release_at = self.night_window.next_business_time(send_instant)
        in_night = self.night_window.contains(send_instant)
        job = intent.job

        # Reminders are never held back past the session they announce
        if intent.notification_type == NotificationType.SESSION_START_REMIND and (
            job.due is None or release_at >= job.due
        ):
            in_night = False

        now_group, later_group = [], []
        for user in intent.recipients:
            prefs = user.preferences
            if prefs.not_get_notification:
                report.skipped.append((user.id, "not_get_notification"))
                continue
            if job.immediate and prefs.not_get_emergency:
                report.skipped.append((user.id, "not_get_emergency"))
                continue
            if not user.email:
                report.skipped.append((user.id, "no_push_tag"))
                continue
            if in_night and not job.immediate and prefs.not_get_nighttime:
                later_group.append(user)
            else:
                now_group.append(user)

        return now_group, later_group, release_at

    async def _dispatch_push(
        self, intent: NotificationIntent, language: str, report: DispatchReport
    ) -> None:
        now_group, later_group, release_at = self.split_push_recipients(intent, report)
        payload = self._push_payload(intent, language)

        for users, send_after, delayed in (
            (now_group, intent.send_at, False),
            (later_group, release_at, True),
        ):
            if not users:
                continue
            await self._hand_off(
                intent,
                users,
                delayed,
                lambda users=users, send_after=send_after: self.channel.send_push(
                    [user.email for user in users], payload, send_after
                ),
                report,
                payload=payload.contents,
                send_after=send_after.isoformat() if send_after else None,
            )

    async def _dispatch_sms(
        self, intent: NotificationIntent, language: str, report: DispatchReport
    ) -> None:
        message = self.templates.sms_text(intent.job, language)
        for user in intent.recipients:
            if not user.mobile:
                report.skipped.append((user.id, "no_mobile"))
                continue
            await self._hand_off(
                intent,
                [user],
                False,
                lambda user=user: self.channel.send_sms(user.mobile, message),
                report,
                payload=message,
            )

    async def _dispatch_email(
        self, intent: NotificationIntent, language: str, report: DispatchReport
    ) -> None:
        envelope = self.templates.email_envelope(
            intent.notification_type, intent.job, intent.context
        )
        for user in intent.recipients:
            address = self._email_address(intent.job, user)
            if not address:
                report.skipped.append((user.id, "no_email"))
                continue
            context = {
                "user_name": user.name,
                "language": language,
                "due": self.templates.format_due(intent.job),
                "job": intent.job.to_notification_data(),
                **intent.context,
            }
            await self._hand_off(
                intent,
                [user],
                False,
                lambda address=address, context=context: self.channel.send_email(
                    address, envelope.subject, envelope.template, context
                ),
                report,
                payload=envelope.subject,
            )

    async def _hand_off(
        self,
        intent: NotificationIntent,
        users: List[User],
        delayed: bool,
        send,
        report: DispatchReport,
        **log_fields,
    ) -> None:
        channel = intent.channel.value
        notification_type = intent.notification_type.value
        recipient_ids = [user.id for user in users]

        self.logger.info(
            "Dispatching notification",
            job_id=str(intent.job.id),
            channel=channel,
            notification_type=notification_type,
            recipients=[str(user_id) for user_id in recipient_ids],
            delayed=delayed,
            **log_fields,
        )
        report.attempted += len(users)
        if delayed:
            report.delayed += len(users)
        record_dispatch(channel, notification_type, delayed)

        try:
            result: DeliveryResult = await send()
        except DeliveryFailedError as e:
            self._record_failure(intent, recipient_ids, str(e), report)
            return

        if not result.success:
            self._record_failure(
                intent, recipient_ids, result.error_message or "rejected by channel", report
            )
            return

        report.delivered += len(users)

    def _record_failure(
        self,
        intent: NotificationIntent,
        recipient_ids: List[UUID],
        error: str,
        report: DispatchReport,
    ) -> None:
        channel = intent.channel.value
        notification_type = intent.notification_type.value
        self.logger.error(
            "Notification delivery failed",
            job_id=str(intent.job.id),
            channel=channel,
            notification_type=notification_type,
            recipients=[str(user_id) for user_id in recipient_ids],
            error=error,
        )
        record_delivery_failure(channel, notification_type)
        report.failures.append(
            DeliveryFailure(notification_type, channel, recipient_ids, error)
        )

    def _push_payload(self, intent: NotificationIntent, language: str) -> PushPayload:
        job = intent.job
        sound = None
        if intent.notification_type.is_emergency_sound():
            sound = "emergency_booking" if job.immediate else "normal_booking"

        data = {
            **job.to_notification_data(),
            "language": language,
            "notification_type": intent.notification_type.value,
            **intent.context,
        }
        return PushPayload(
            contents=self.templates.push_contents(
                intent.notification_type, job, language, intent.context
            ),
            data=data,
            sound=sound,
        )

    @staticmethod
    def _email_address(job: Job, user: User) -> Optional[str]:
        if user.id == job.user_id and job.user_email:
            return job.user_email
        return user.email

    async def _language_name(self, job: Job, cache: Dict[int, str]) -> str:
        if job.from_language_id not in cache:
            name = await self.language_repo.get_name(job.from_language_id)
            cache[job.from_language_id] = name or str(job.from_language_id)
        return cache[job.from_language_id]
