"""
Unit tests for the Redis job lock.
"""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from redis.exceptions import LockError

from booking_engine.domain.exceptions.booking_error import JobBusyError
from booking_engine.infrastructure.locks.redis_lock import RedisJobLock


def redis_with_lock(acquired=True, release_error=None):
    lock = MagicMock()
    lock.acquire = AsyncMock(return_value=acquired)
    lock.release = AsyncMock(side_effect=release_error)
    client = MagicMock()
    client.lock.return_value = lock
    return client, lock


class TestRedisJobLock:
    @pytest.mark.asyncio
    async def test_acquire_and_release(self):
        client, lock = redis_with_lock()
        job_id = uuid4()

        async with RedisJobLock(client, timeout=5, blocking_timeout=2).acquire(job_id):
            lock.release.assert_not_awaited()

        client.lock.assert_called_once_with(f"job-lock:{job_id}", timeout=5, blocking_timeout=2)
        lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_busy_job(self):
        client, lock = redis_with_lock(acquired=False)

        with pytest.raises(JobBusyError):
            async with RedisJobLock(client).acquire(uuid4()):
                pass

        lock.release.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_released_even_when_body_fails(self):
        client, lock = redis_with_lock()

        with pytest.raises(RuntimeError):
            async with RedisJobLock(client).acquire(uuid4()):
                raise RuntimeError("boom")

        lock.release.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_lock_is_tolerated(self):
        client, _ = redis_with_lock(release_error=LockError("expired"))

        async with RedisJobLock(client).acquire(uuid4()):
            pass
