"""
Service interfaces for dependency inversion.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager, Awaitable, Callable, TypeVar
from uuid import UUID

T = TypeVar("T")


class ClockInterface(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current timezone-aware UTC time."""
        pass


class JobLockInterface(ABC):
    """Per-job mutual exclusion."""

    @abstractmethod
    def acquire(self, job_id: UUID) -> AsyncContextManager[None]:
        """Hold the lock for ``job_id`` for the duration of the context."""
        pass


class TransactionInterface(ABC):
    """Unit of work around a use case."""

    @abstractmethod
    async def execute_in_transaction(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Run ``operation`` and commit, rolling back if it raises."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Commit the current transaction."""
        pass

    @abstractmethod
    async def rollback(self) -> None:
        """Roll back the current transaction."""
        pass
