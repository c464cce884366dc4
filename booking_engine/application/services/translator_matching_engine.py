"""
Translator Matching Engine for pairing bookings with interpreters.
"""

from datetime import datetime
from typing import FrozenSet, List, Optional
from uuid import UUID

from booking_engine.application.interfaces.repositories import (
    BlacklistRepositoryInterface,
    JobCriteria,
    JobRepositoryInterface,
    TranslatorCriteria,
    UserRepositoryInterface,
)
from booking_engine.application.services.eligibility_filter import (
    EligibilityFilter,
    JobRequirements,
)
from booking_engine.config.logging import get_logger
from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User

logger = get_logger(__name__)


class TranslatorMatchingEngine:
    """Finds potential translators for a job and potential jobs for a translator."""

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        job_repo: JobRepositoryInterface,
        blacklist_repo: BlacklistRepositoryInterface,
        eligibility_filter: Optional[EligibilityFilter] = None,
    ):
        self.user_repo = user_repo
        self.job_repo = job_repo
        self.blacklist_repo = blacklist_repo
        self.eligibility_filter = eligibility_filter or EligibilityFilter()
        self.logger = logger

    async def find_potential_translators(
        self, job: Job, exclude_translator_ids: FrozenSet[UUID] = frozenset()
    ) -> List[User]:
        """
        Find every translator that may accept the job.

        Args:
            job: Booking to staff
            exclude_translator_ids: Translators left out regardless of eligibility,
                e.g. the one who just cancelled

        Returns:
            Eligible translators, in repository order
        """
        requirements = JobRequirements.for_job(job)
        criteria = TranslatorCriteria(
            translator_type=requirements.translator_type,
            language_id=requirements.language_id,
            gender=requirements.gender,
            levels=requirements.acceptable_levels,
        )
        candidates = await self.user_repo.find_translators(criteria)
        blocked = await self.blacklist_repo.get_blocked_translator_ids(job.user_id)

        matches = []
        for translator in candidates:
            if translator.id in exclude_translator_ids:
                continue
            reasons = self.eligibility_filter.rejection_reasons(
                requirements, translator, blocked
            )
            if reasons:
                self.logger.debug(
                    "Translator rejected for job",
                    job_id=str(job.id),
                    translator_id=str(translator.id),
                    reasons=reasons,
                )
                continue
            matches.append(translator)

        self.logger.info(
            "Found potential translators",
            job_id=str(job.id),
            candidates=len(candidates),
            matches=len(matches),
            physical_only=requirements.physical_only,
        )
        return matches

    async def find_potential_jobs(
        self,
        translator: User,
        now: Optional[datetime] = None,
        limit: int = 100,
    ) -> List[Job]:
        """
        Find pending jobs the translator may accept.

        Jobs already due at ``now`` are left out when ``now`` is given. Type,
        language, gender, level and blacklist are filtered in storage; the
        town rule for on-site bookings is checked here.
        """
        blocking_customers = await self.blacklist_repo.get_blocking_customer_ids(
            translator.id
        )
        criteria = JobCriteria.for_translator(
            translator, due_after=now, excluded_customer_ids=blocking_customers
        )
        pending_jobs = await self.job_repo.find_pending_matching(criteria, limit)

        matches = []
        for job in pending_jobs:
            if self.eligibility_filter.is_eligible(job, translator):
                matches.append(job)

        self.logger.info(
            "Found potential jobs",
            translator_id=str(translator.id),
            pending=len(pending_jobs),
            matches=len(matches),
        )
        return matches

    async def is_potential_match(self, job: Job, translator: User) -> bool:
        """Check a single pairing, blacklist included."""
        blocked = await self.blacklist_repo.get_blocked_translator_ids(job.user_id)
        return self.eligibility_filter.is_eligible(job, translator, blocked)
