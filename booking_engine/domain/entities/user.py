"""
Marketplace user domain entity.
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Optional
from uuid import UUID, uuid4

from booking_engine.domain.value_objects.job_attributes import Gender
from booking_engine.domain.value_objects.translator import (
    TranslatorLevel,
    TranslatorType,
)
from booking_engine.domain.value_objects.user_role import UserRole, UserStatus


@dataclass(frozen=True)
class NotificationPreferences:
    """Push opt-outs a user has set in their profile."""

    not_get_notification: bool = False
    not_get_nighttime: bool = False
    not_get_emergency: bool = False


@dataclass
class User:
    """Customer, translator or administrator account."""

    role: UserRole
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    email: Optional[str] = None
    mobile: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    translator_type: Optional[TranslatorType] = None
    translator_level: Optional[TranslatorLevel] = None
    gender: Optional[Gender] = None
    consumer_type: Optional[str] = None
    customer_type: Optional[str] = None
    language_ids: FrozenSet[int] = frozenset()
    town: Optional[str] = None
    preferences: NotificationPreferences = field(default_factory=NotificationPreferences)

    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    def is_translator(self) -> bool:
        return self.role == UserRole.TRANSLATOR

    def is_admin(self) -> bool:
        return self.role.is_staff()

    def speaks(self, language_id: int) -> bool:
        """Check if the translator works with the given language."""
        return language_id in self.language_ids
