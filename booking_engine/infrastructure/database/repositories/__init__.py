"""
Database repositories package.
"""

from .assignment_repository import AssignmentRepository
from .blacklist_repository import BlacklistRepository
from .job_repository import JobRepository
from .language_repository import LanguageRepository
from .transaction_repository import TransactionService
from .user_repository import UserRepository

__all__ = [
    "AssignmentRepository",
    "BlacklistRepository",
    "JobRepository",
    "LanguageRepository",
    "TransactionService",
    "UserRepository",
]
