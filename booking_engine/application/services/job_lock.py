"""
In-process per-job lock.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict
from uuid import UUID

from booking_engine.application.interfaces.services import JobLockInterface
from booking_engine.config.logging import get_logger

logger = get_logger(__name__)


class InMemoryJobLock(JobLockInterface):
    """One asyncio lock per job id, valid within a single process."""

    def __init__(self):
        self._locks: Dict[UUID, asyncio.Lock] = {}
        self._holders: Dict[UUID, int] = {}

    @asynccontextmanager
    async def acquire(self, job_id: UUID) -> AsyncIterator[None]:
        lock = self._locks.setdefault(job_id, asyncio.Lock())
        self._holders[job_id] = self._holders.get(job_id, 0) + 1
        try:
            async with lock:
                logger.debug("Job lock acquired", job_id=str(job_id))
                yield
        finally:
            self._holders[job_id] -= 1
            if self._holders[job_id] == 0:
                # No waiters left, drop the lock so the map does not grow forever
                del self._holders[job_id]
                del self._locks[job_id]
