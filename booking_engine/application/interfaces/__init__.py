"""
Application interfaces package.
"""

from .channels import ChannelAdapterInterface, DeliveryResult, PushPayload
from .repositories import (
    AssignmentRepositoryInterface,
    BlacklistRepositoryInterface,
    JobRepositoryInterface,
    LanguageRepositoryInterface,
    TranslatorCriteria,
    UserRepositoryInterface,
)
from .services import ClockInterface, JobLockInterface, TransactionInterface

__all__ = [
    "AssignmentRepositoryInterface",
    "BlacklistRepositoryInterface",
    "ChannelAdapterInterface",
    "ClockInterface",
    "DeliveryResult",
    "JobLockInterface",
    "JobRepositoryInterface",
    "LanguageRepositoryInterface",
    "PushPayload",
    "TransactionInterface",
    "TranslatorCriteria",
    "UserRepositoryInterface",
]
