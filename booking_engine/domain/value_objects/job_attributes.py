"""
Job classification value objects.
"""

from enum import Enum
from typing import FrozenSet, Iterable, Optional


class JobType(str, Enum):
    """Commercial category of a booking."""

    PAID = "paid"
    RWS = "rws"
    UNPAID = "unpaid"

    @classmethod
    def from_consumer_type(cls, consumer_type: Optional[str]) -> "JobType":
        """Derive the job type from the ordering customer's consumer type."""
        if consumer_type == "rws_consumer":
            return cls.RWS
        if consumer_type == "paid":
            return cls.PAID
        return cls.UNPAID


class Gender(str, Enum):
    """Gender constraint for a booking or attribute of a translator."""

    MALE = "male"
    FEMALE = "female"


class Certification(str, Enum):
    """Certification requirement of a booking."""

    NONE = "none"
    NORMAL = "normal"
    YES = "yes"
    LAW = "law"
    HEALTH = "health"
    BOTH = "both"
    N_LAW = "n_law"
    N_HEALTH = "n_health"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Certification":
        """Parse a stored or submitted certification value."""
        if not value:
            return cls.NONE
        if value == "certified":
            return cls.YES
        return cls(value)

    def acceptable_levels(self) -> FrozenSet["TranslatorLevel"]:
        """Translator levels that satisfy this requirement."""
        from booking_engine.domain.value_objects.translator import TranslatorLevel

        if self in [self.YES, self.BOTH]:
            return frozenset(
                {
                    TranslatorLevel.CERTIFIED,
                    TranslatorLevel.CERTIFIED_LAW,
                    TranslatorLevel.CERTIFIED_HEALTH,
                }
            )
        if self in [self.LAW, self.N_LAW]:
            return frozenset({TranslatorLevel.CERTIFIED_LAW})
        if self in [self.HEALTH, self.N_HEALTH]:
            return frozenset({TranslatorLevel.CERTIFIED_HEALTH})
        if self == self.NORMAL:
            return frozenset(
                {TranslatorLevel.LAYMAN, TranslatorLevel.TRANSLATION_COURSE}
            )
        return frozenset(TranslatorLevel)


# Accepted spellings of the health-care option ("helth" is what older clients submit)
_HEALTH_OPTIONS = ("certified_in_health", "certified_in_helth")


def gender_from_job_for(options: Iterable[str]) -> Optional[Gender]:
    """Resolve the gender constraint from a booking's "job for" option list."""
    selected = set(options or [])
    if Gender.MALE.value in selected:
        return Gender.MALE
    if Gender.FEMALE.value in selected:
        return Gender.FEMALE
    return None


def certification_from_job_for(options: Iterable[str]) -> Certification:
    """
    Resolve the certification requirement from a "job for" option list.

    A combination of "normal" with a certified option collapses into the
    combined values (both, n_law, n_health).
    """
    selected = set(options or [])
    wants_normal = "normal" in selected
    wants_health = any(option in selected for option in _HEALTH_OPTIONS)

    if wants_normal and "certified" in selected:
        return Certification.BOTH
    if wants_normal and "certified_in_law" in selected:
        return Certification.N_LAW
    if wants_normal and wants_health:
        return Certification.N_HEALTH
    if wants_normal:
        return Certification.NORMAL
    if "certified" in selected:
        return Certification.YES
    if "certified_in_law" in selected:
        return Certification.LAW
    if wants_health:
        return Certification.HEALTH
    return Certification.NONE
