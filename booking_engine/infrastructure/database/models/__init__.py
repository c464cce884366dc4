"""
Database models package.
"""

from .assignment import AssignmentModel
from .base import Base, BaseModel, UTCDateTime
from .blacklist import BlacklistModel
from .job import JobModel
from .language import LanguageModel
from .user import UserLanguageModel, UserModel

__all__ = [
    "Base",
    "BaseModel",
    "UTCDateTime",
    "AssignmentModel",
    "BlacklistModel",
    "JobModel",
    "LanguageModel",
    "UserModel",
    "UserLanguageModel",
]
