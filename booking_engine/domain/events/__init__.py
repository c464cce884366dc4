"""
Domain events package.
"""

from .change_record import ChangeRecord
from .notification_intent import NotificationIntent
from .transition_outcome import AssignmentAction, TransitionOutcome

__all__ = [
    "AssignmentAction",
    "ChangeRecord",
    "NotificationIntent",
    "TransitionOutcome",
]
