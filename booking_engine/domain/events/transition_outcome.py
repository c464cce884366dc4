"""
Transition outcome domain event.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional
from uuid import UUID

from booking_engine.domain.events.change_record import ChangeRecord
from booking_engine.domain.events.notification_intent import NotificationIntent
from booking_engine.domain.value_objects.job_status import JobStatus


class AssignmentAction(str, Enum):
    """What the assignment ledger must do once a transition is applied."""

    NONE = "none"
    BIND = "bind"
    COMPLETE = "complete"
    RELEASE = "release"


@dataclass
class TransitionOutcome:
    """Planned result of a job status change, produced before anything is mutated."""

    job_id: UUID
    old_status: JobStatus
    new_status: JobStatus
    planned_at: Optional[datetime] = None
    updates: Dict[str, Any] = field(default_factory=dict)
    changes: List[ChangeRecord] = field(default_factory=list)
    intents: List[NotificationIntent] = field(default_factory=list)
    assignment_action: AssignmentAction = AssignmentAction.NONE
    translator_id: Optional[UUID] = None
    reassign_to_id: Optional[UUID] = None
    rematch: bool = False
    excluded_translator_ids: FrozenSet[UUID] = frozenset()

    @property
    def status_changed(self) -> bool:
        return self.old_status != self.new_status
