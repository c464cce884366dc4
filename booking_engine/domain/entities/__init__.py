"""
Domain entities package.
"""

from .assignment import Assignment
from .job import Job
from .user import NotificationPreferences, User

__all__ = [
    "Assignment",
    "Job",
    "NotificationPreferences",
    "User",
]
