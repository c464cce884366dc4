"""
Application services package.
"""

from .assignment_ledger import AssignmentLedger, Binding, Reassignment
from .business_hours import NightWindow
from .clock import SystemClock
from .eligibility_filter import EligibilityFilter, JobRequirements
from .expiry_calculator import will_expire_at
from .job_lock import InMemoryJobLock
from .job_state_machine import AdminEdit, JobStateMachine, Parties
from .message_templates import MessageTemplates
from .notification_dispatcher import DispatchReport, NotificationDispatcher
from .translator_matching_engine import TranslatorMatchingEngine

__all__ = [
    "AdminEdit",
    "AssignmentLedger",
    "Binding",
    "DispatchReport",
    "EligibilityFilter",
    "InMemoryJobLock",
    "JobRequirements",
    "JobStateMachine",
    "MessageTemplates",
    "NightWindow",
    "NotificationDispatcher",
    "Parties",
    "Reassignment",
    "SystemClock",
    "TranslatorMatchingEngine",
    "will_expire_at",
]
