"""
Composition of the booking orchestrator from infrastructure parts.
"""

from functools import lru_cache
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.interfaces.channels import ChannelAdapterInterface
from booking_engine.application.interfaces.services import (
    ClockInterface,
    JobLockInterface,
)
from booking_engine.application.services.assignment_ledger import AssignmentLedger
from booking_engine.application.services.business_hours import NightWindow
from booking_engine.application.services.clock import SystemClock
from booking_engine.application.services.job_lock import InMemoryJobLock
from booking_engine.application.services.job_state_machine import JobStateMachine
from booking_engine.application.services.message_templates import MessageTemplates
from booking_engine.application.services.notification_dispatcher import (
    NotificationDispatcher,
)
from booking_engine.application.services.translator_matching_engine import (
    TranslatorMatchingEngine,
)
from booking_engine.application.use_cases.booking_orchestrator import (
    BookingOrchestrator,
)
from booking_engine.config.logging import get_logger
from booking_engine.config.settings import Settings, settings as default_settings
from booking_engine.infrastructure.channels.factory import create_channel_adapter
from booking_engine.infrastructure.database.repositories import (
    AssignmentRepository,
    BlacklistRepository,
    JobRepository,
    LanguageRepository,
    TransactionService,
    UserRepository,
)

logger = get_logger(__name__)


@lru_cache(maxsize=None)
def get_job_lock() -> JobLockInterface:
    """Process-wide job lock, shared by every request and task."""
    if default_settings.JOB_LOCK_BACKEND == "redis":
        import redis.asyncio as redis

        from booking_engine.infrastructure.locks.redis_lock import RedisJobLock

        client = redis.from_url(default_settings.REDIS_URL)
        timeout = float(default_settings.JOB_LOCK_TIMEOUT_SECONDS)
        logger.info("Using Redis job lock", timeout=timeout)
        return RedisJobLock(client, timeout=timeout, blocking_timeout=timeout)
    return InMemoryJobLock()


@lru_cache(maxsize=None)
def get_channel_adapter() -> ChannelAdapterInterface:
    """Process-wide channel adapter built from settings."""
    return create_channel_adapter(default_settings)


def build_orchestrator(
    session: AsyncSession,
    config: Optional[Settings] = None,
    channel: Optional[ChannelAdapterInterface] = None,
    job_lock: Optional[JobLockInterface] = None,
    clock: Optional[ClockInterface] = None,
) -> BookingOrchestrator:
    """Wire a BookingOrchestrator around one database session."""
    config = config or default_settings
    clock = clock or SystemClock()

    job_repo = JobRepository(session)
    user_repo = UserRepository(session)
    assignment_repo = AssignmentRepository(session)
    blacklist_repo = BlacklistRepository(session)
    language_repo = LanguageRepository(session)

    ledger = AssignmentLedger(
        job_repo, assignment_repo, user_repo, job_lock or get_job_lock(), clock
    )
    state_machine = JobStateMachine(
        cancellation_window_hours=config.CANCELLATION_WINDOW_HOURS,
        reminder_lead_minutes=config.SESSION_REMINDER_LEAD_MINUTES,
    )
    matching_engine = TranslatorMatchingEngine(user_repo, job_repo, blacklist_repo)
    dispatcher = NotificationDispatcher(
        channel or get_channel_adapter(),
        clock,
        language_repo,
        night_window=NightWindow(
            config.NOTIFICATION_NIGHT_START_HOUR,
            config.NOTIFICATION_NIGHT_END_HOUR,
            config.NOTIFICATION_TIMEZONE,
        ),
        templates=MessageTemplates(config.NOTIFICATION_LOCALE, config.NOTIFICATION_TIMEZONE),
    )

    return BookingOrchestrator(
        job_repo,
        user_repo,
        ledger,
        state_machine,
        matching_engine,
        dispatcher,
        TransactionService(session),
        clock,
        immediate_lead_minutes=config.IMMEDIATE_JOB_LEAD_MINUTES,
    )
