"""
Redis-backed per-job lock for multi-process deployments.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import UUID

from redis.exceptions import LockError

from booking_engine.application.interfaces.services import JobLockInterface
from booking_engine.config.logging import get_logger
from booking_engine.domain.exceptions.booking_error import JobBusyError

logger = get_logger(__name__)


class RedisJobLock(JobLockInterface):
    """
    Job lock shared by every API and worker process.

    The lock expires after ``timeout`` seconds so a crashed holder cannot
    block a job forever; callers waiting longer than ``blocking_timeout``
    get a JobBusyError.
    """

    def __init__(self, redis_client, timeout: float = 10.0, blocking_timeout: float = 10.0):
        self.redis = redis_client
        self.timeout = timeout
        self.blocking_timeout = blocking_timeout

    @asynccontextmanager
    async def acquire(self, job_id: UUID) -> AsyncIterator[None]:
        lock = self.redis.lock(
            f"job-lock:{job_id}",
            timeout=self.timeout,
            blocking_timeout=self.blocking_timeout,
        )
        if not await lock.acquire():
            logger.warning("Job lock not acquired", job_id=str(job_id))
            raise JobBusyError(job_id, self.blocking_timeout)

        logger.debug("Job lock acquired", job_id=str(job_id))
        try:
            yield
        finally:
            try:
                await lock.release()
            except LockError:
                # Expired while held; the guarded UPDATE still rejects stale writers
                logger.warning("Job lock expired before release", job_id=str(job_id))
