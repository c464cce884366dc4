"""Resend booking offers use case."""

from dataclasses import dataclass
from uuid import UUID

from booking_engine.application.services.notification_dispatcher import DispatchReport
from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.exceptions.booking_error import InvalidTransitionError
from booking_engine.domain.value_objects.job_status import JobStatus
from booking_engine.domain.value_objects.notification_type import Channel

logger = get_logger(__name__)


@dataclass
class ResendNotificationsResult:
    recipients: int
    report: DispatchReport


class ResendNotificationsUseCase(BookingUseCase):
    """Offers a pending booking again to every suitable translator."""

    async def execute(
        self, job_id: UUID, channel: Channel = Channel.PUSH
    ) -> ResendNotificationsResult:
        job = await self._load_job(job_id)
        if job.status != JobStatus.PENDING:
            raise InvalidTransitionError(
                job.status, job.status, "only pending bookings can be offered to translators"
            )

        intents = await self._suitable_translator_intents(job, channel=channel)
        report = await self.dispatcher.dispatch(intents)
        recipients = sum(len(intent.recipients) for intent in intents)

        logger.info(
            "Booking offer resent",
            job_id=str(job.id),
            channel=channel.value,
            recipients=recipients,
        )
        return ResendNotificationsResult(recipients=recipients, report=report)
