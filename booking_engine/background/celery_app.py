"""
Celery application configuration and setup.
"""

from celery import Celery

from booking_engine.config.logging import configure_logging
from booking_engine.config.settings import settings

configure_logging()

celery_app = Celery(
    "booking_engine",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["booking_engine.background.tasks.sweeps"],
)

celery_app.conf.update(
    task_routes={
        "expire_pending_jobs_task": {"queue": "sweeps"},
        "start_due_sessions_task": {"queue": "sweeps"},
    },
    # Worker configuration
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=100,
    worker_hijack_root_logger=False,
    # Task configuration
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    result_expires=3600,
    task_default_queue="default",
    beat_schedule={
        "expire-pending-jobs": {
            "task": "expire_pending_jobs_task",
            "schedule": float(settings.CELERY_EXPIRE_PENDING_JOBS_INTERVAL_SECONDS),
            "options": {"queue": "sweeps"},
        },
        "start-due-sessions": {
            "task": "start_due_sessions_task",
            "schedule": float(settings.CELERY_START_DUE_SESSIONS_INTERVAL_SECONDS),
            "options": {"queue": "sweeps"},
        },
    },
    # Task time limits
    task_soft_time_limit=settings.CELERY_TASK_SOFT_TIME_LIMIT,
    task_time_limit=settings.CELERY_TASK_TIME_LIMIT,
    task_acks_late=False,
    task_reject_on_worker_lost=settings.CELERY_TASK_REJECT_ON_WORKER_LOST,
)


if __name__ == "__main__":
    celery_app.start()
