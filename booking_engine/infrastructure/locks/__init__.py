"""
Distributed job locks.
"""

from .redis_lock import RedisJobLock

__all__ = ["RedisJobLock"]
