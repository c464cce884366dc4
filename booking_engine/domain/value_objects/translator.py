"""
Translator classification value objects.
"""

from enum import Enum

from booking_engine.domain.value_objects.job_attributes import JobType


class TranslatorType(str, Enum):
    """Translator contract type."""

    PROFESSIONAL = "professional"
    RWS_TRANSLATOR = "rws_translator"
    VOLUNTEER = "volunteer"

    @classmethod
    def for_job_type(cls, job_type) -> "TranslatorType":
        """Translator type that may serve a job of the given type."""
        mapping = {
            JobType.PAID: cls.PROFESSIONAL,
            JobType.RWS: cls.RWS_TRANSLATOR,
            JobType.UNPAID: cls.VOLUNTEER,
        }
        try:
            return mapping.get(JobType(job_type), cls.VOLUNTEER)
        except ValueError:
            return cls.VOLUNTEER


class TranslatorLevel(str, Enum):
    """Translator certification tier."""

    CERTIFIED = "Certified"
    CERTIFIED_LAW = "Certified with specialisation in law"
    CERTIFIED_HEALTH = "Certified with specialisation in health care"
    LAYMAN = "Layman"
    TRANSLATION_COURSE = "Read Translation courses"
