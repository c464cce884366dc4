"""
Celery tasks package.
"""

from .sweeps import expire_pending_jobs_task, start_due_sessions_task

__all__ = ["expire_pending_jobs_task", "start_due_sessions_task"]
