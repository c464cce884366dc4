"""
Job status value object.
"""

from enum import Enum
from typing import Dict, FrozenSet


class JobStatus(str, Enum):
    """Booking job status enumeration."""

    PENDING = "pending"
    ASSIGNED = "assigned"
    STARTED = "started"
    COMPLETED = "completed"
    WITHDRAWBEFORE24 = "withdrawbefore24"
    WITHDRAWAFTER24 = "withdrawafter24"
    TIMEDOUT = "timedout"
    NOT_CARRIED_OUT_CUSTOMER = "not_carried_out_customer"

    def is_terminal(self) -> bool:
        """Check if the job cycle has ended."""
        return self in _TERMINAL

    def is_open(self) -> bool:
        """Check if a translator may still be bound or working on the job."""
        return self in [self.PENDING, self.ASSIGNED, self.STARTED]

    def allowed_targets(self, by_admin: bool = False) -> FrozenSet["JobStatus"]:
        """Statuses reachable from this one."""
        targets = _LIFECYCLE.get(self, frozenset())
        if by_admin:
            targets = targets | _ADMIN_CORRECTIONS.get(self, frozenset())
        return targets

    def can_transition_to(self, target: "JobStatus", by_admin: bool = False) -> bool:
        """Check the transition table for a status change."""
        return target in self.allowed_targets(by_admin)

    def is_withdrawn(self) -> bool:
        """Check if the customer withdrew the booking."""
        return self in [self.WITHDRAWBEFORE24, self.WITHDRAWAFTER24]


_TERMINAL = frozenset(
    {
        JobStatus.COMPLETED,
        JobStatus.WITHDRAWBEFORE24,
        JobStatus.WITHDRAWAFTER24,
        JobStatus.NOT_CARRIED_OUT_CUSTOMER,
    }
)

_LIFECYCLE: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.PENDING: frozenset(
        {
            JobStatus.ASSIGNED,
            JobStatus.TIMEDOUT,
            JobStatus.WITHDRAWBEFORE24,
            JobStatus.WITHDRAWAFTER24,
        }
    ),
    JobStatus.ASSIGNED: frozenset(
        {
            JobStatus.STARTED,
            JobStatus.PENDING,
            JobStatus.WITHDRAWBEFORE24,
            JobStatus.WITHDRAWAFTER24,
            JobStatus.TIMEDOUT,
            JobStatus.NOT_CARRIED_OUT_CUSTOMER,
        }
    ),
    JobStatus.STARTED: frozenset(
        {
            JobStatus.COMPLETED,
            JobStatus.TIMEDOUT,
            JobStatus.NOT_CARRIED_OUT_CUSTOMER,
        }
    ),
    JobStatus.TIMEDOUT: frozenset({JobStatus.PENDING, JobStatus.ASSIGNED}),
}

# Corrections only an administrator may apply to a closed booking
_ADMIN_CORRECTIONS: Dict[JobStatus, FrozenSet[JobStatus]] = {
    JobStatus.COMPLETED: frozenset({JobStatus.TIMEDOUT}),
    JobStatus.WITHDRAWAFTER24: frozenset({JobStatus.TIMEDOUT}),
}
