"""Potential jobs use case."""

from typing import List
from uuid import UUID

from booking_engine.application.use_cases.base import BookingUseCase
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.exceptions.validation_error import ValidationFailedError

logger = get_logger(__name__)


class GetPotentialJobsUseCase(BookingUseCase):
    """Lists the open bookings a translator could accept right now."""

    async def execute(self, translator_id: UUID, limit: int = 100) -> List[Job]:
        now = self._now()
        translator = await self._load_user(translator_id, "Translator")
        if not translator.is_translator():
            raise ValidationFailedError("Only translators have potential jobs", "translator_id")

        jobs = await self.matching_engine.find_potential_jobs(translator, now, limit)

        available = []
        for job in jobs:
            if await self.ledger.is_translator_booked_at(translator.id, job.due, job.id):
                continue
            available.append(job)

        logger.debug(
            "Potential jobs listed",
            translator_id=str(translator.id),
            count=len(available),
        )
        return available
