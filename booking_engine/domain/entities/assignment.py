"""
Translator assignment domain entity.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from booking_engine.domain.exceptions.booking_error import InvalidTransitionError


@dataclass
class Assignment:
    """Binding of one translator to one job."""

    job_id: UUID
    translator_id: UUID
    id: UUID = field(default_factory=uuid4)
    created_at: Optional[datetime] = None
    cancel_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    completed_by: Optional[UUID] = None

    def __post_init__(self):
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc)

    def is_open(self) -> bool:
        """Check if this is the job's current binding."""
        return self.cancel_at is None and self.completed_at is None

    def cancel(self, at: datetime) -> None:
        """Close the binding without completion."""
        self._ensure_open()
        self.cancel_at = at

    def complete(self, completed_by: UUID, completed_at: datetime) -> None:
        """Close the binding with a completion record."""
        self._ensure_open()
        self.completed_at = completed_at
        self.completed_by = completed_by

    def _ensure_open(self) -> None:
        if not self.is_open():
            raise InvalidTransitionError(
                "closed", "closed", f"assignment {self.id} is already closed"
            )
