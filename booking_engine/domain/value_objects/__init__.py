"""
Domain value objects package.
"""

from .job_attributes import (
    Certification,
    Gender,
    JobType,
    certification_from_job_for,
    gender_from_job_for,
)
from .job_status import JobStatus
from .notification_type import Channel, NotificationType
from .session_time import SessionTime, format_minutes
from .translator import TranslatorLevel, TranslatorType
from .user_role import UserRole, UserStatus

__all__ = [
    "Certification",
    "Channel",
    "Gender",
    "JobStatus",
    "JobType",
    "NotificationType",
    "SessionTime",
    "TranslatorLevel",
    "TranslatorType",
    "UserRole",
    "UserStatus",
    "certification_from_job_for",
    "format_minutes",
    "gender_from_job_for",
]
