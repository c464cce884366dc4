"""
Notification type and channel value objects.
"""

from enum import Enum


class Channel(str, Enum):
    """Delivery channel for a notification."""

    PUSH = "push"
    SMS = "sms"
    EMAIL = "email"


class NotificationType(str, Enum):
    """What a notification tells its recipient."""

    JOB_CREATED = "job_created"
    SUITABLE_JOB = "suitable_job"
    JOB_ACCEPTED = "job_accepted"
    ASSIGNMENT_CONFIRMED = "assignment_confirmed"
    JOB_CANCELLED = "job_cancelled"
    JOB_EXPIRED = "job_expired"
    SESSION_START_REMIND = "session_start_remind"
    SESSION_ENDED = "session_ended"
    JOB_REOPENED = "job_reopened"
    STATUS_CHANGED = "status_changed"
    JOB_CHANGED_DATE = "job_changed_date"
    JOB_CHANGED_LANGUAGE = "job_changed_lang"
    JOB_CHANGED_TRANSLATOR = "job_changed_translator"

    def is_emergency_sound(self) -> bool:
        """Check if the push should use the emergency sound for immediate jobs."""
        return self == self.SUITABLE_JOB
