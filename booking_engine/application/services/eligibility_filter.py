"""
Eligibility rules deciding whether a translator may serve a job.
"""

from dataclasses import dataclass
from typing import FrozenSet, List, Optional
from uuid import UUID

from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.value_objects.job_attributes import Gender
from booking_engine.domain.value_objects.translator import (
    TranslatorLevel,
    TranslatorType,
)


@dataclass(frozen=True)
class JobRequirements:
    """Translator attributes a job asks for."""

    job_id: UUID
    translator_type: TranslatorType
    language_id: int
    gender: Optional[Gender]
    acceptable_levels: FrozenSet[TranslatorLevel]
    town: Optional[str]
    physical_only: bool

    @classmethod
    def for_job(cls, job: Job) -> "JobRequirements":
        return cls(
            job_id=job.id,
            translator_type=TranslatorType.for_job_type(job.job_type),
            language_id=job.from_language_id,
            gender=job.gender,
            acceptable_levels=job.certified.acceptable_levels(),
            town=job.town,
            physical_only=job.is_physical_only(),
        )


class EligibilityFilter:
    """Decides a single job/translator match."""

    def rejection_reasons(
        self,
        requirements: JobRequirements,
        translator: User,
        blocked_translator_ids: FrozenSet[UUID] = frozenset(),
    ) -> List[str]:
        """
        List every rule the translator fails for the job.

        An empty list means the translator is a potential match.
        """
        reasons = []

        if not translator.is_translator():
            reasons.append("not_a_translator")
        if not translator.is_active():
            reasons.append("inactive")
        if translator.translator_type != requirements.translator_type:
            reasons.append("translator_type")
        if not translator.speaks(requirements.language_id):
            reasons.append("language")
        if requirements.gender and translator.gender != requirements.gender:
            reasons.append("gender")
        if translator.translator_level not in requirements.acceptable_levels:
            reasons.append("level")
        if translator.id in blocked_translator_ids:
            reasons.append("blacklisted")
        if requirements.physical_only and not same_town(requirements.town, translator.town):
            reasons.append("town")

        return reasons

    def is_eligible(
        self,
        job: Job,
        translator: User,
        blocked_translator_ids: FrozenSet[UUID] = frozenset(),
    ) -> bool:
        """Check if the translator may serve the job."""
        requirements = JobRequirements.for_job(job)
        return not self.rejection_reasons(requirements, translator, blocked_translator_ids)


def same_town(job_town: Optional[str], translator_town: Optional[str]) -> bool:
    """Case-insensitive town comparison; a missing town never matches."""
    if not job_town or not translator_town:
        return False
    return job_town.strip().casefold() == translator_town.strip().casefold()
