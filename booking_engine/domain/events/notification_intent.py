"""
Notification intent domain event.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from booking_engine.domain.entities.job import Job
from booking_engine.domain.entities.user import User
from booking_engine.domain.value_objects.notification_type import (
    Channel,
    NotificationType,
)


@dataclass
class NotificationIntent:
    """A decision that some users must be told something about a job."""

    notification_type: NotificationType
    channel: Channel
    recipients: Tuple[User, ...]
    job: Job
    context: Dict[str, Any] = field(default_factory=dict)
    send_at: Optional[datetime] = None

    def __post_init__(self):
        self.recipients = tuple(self.recipients)

    @property
    def is_scheduled(self) -> bool:
        """Check if the intent targets a future instant rather than now."""
        return self.send_at is not None
