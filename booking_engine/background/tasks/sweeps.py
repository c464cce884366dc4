"""
Scheduled sweeps over the booking lifecycle.

Beat triggers both tasks periodically. Each run opens its own engine and
event loop, asks the orchestrator for one batch and records the outcome.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from booking_engine.application.use_cases.booking_orchestrator import (
    BookingOrchestrator,
)
from booking_engine.application.use_cases.expire_pending_jobs import SweepResult
from booking_engine.background.celery_app import celery_app
from booking_engine.config.database import (
    create_engine,
    make_session_factory,
    session_scope,
)
from booking_engine.config.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
)
from booking_engine.config.settings import settings
from booking_engine.infrastructure.container import build_orchestrator
from booking_engine.infrastructure.monitoring.metrics import record_sweep

logger = get_logger(__name__)

Sweep = Callable[[BookingOrchestrator], Awaitable[SweepResult]]


def run_async_in_new_loop(coro):
    """
    Run an async coroutine in a new event loop.

    Each Celery task gets its own loop so database connections are never
    shared between loops.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def run_sweep(
    name: str,
    sweep: Sweep,
    session_factory: async_sessionmaker[AsyncSession] = None,
) -> Dict[str, Any]:
    """Run one sweep batch and record its outcome."""
    engine = None
    if session_factory is None:
        engine = create_engine()
        session_factory = make_session_factory(engine)

    clear_request_context()
    bind_request_context(sweep=name)
    try:
        async with session_scope(session_factory) as session:
            orchestrator = build_orchestrator(session)
            result = await sweep(orchestrator)
    except Exception as e:
        record_sweep(name, "error")
        logger.error("Sweep failed", sweep=name, error=str(e), exc_info=True)
        raise
    finally:
        if engine is not None:
            await engine.dispose()

    record_sweep(name, "partial" if result.failed else "success")
    return {
        "sweep": name,
        "processed": result.processed,
        "changed": [str(job_id) for job_id in result.changed],
        "failed": [str(job_id) for job_id in result.failed],
    }


@celery_app.task(name="expire_pending_jobs_task")
def expire_pending_jobs_task() -> Dict[str, Any]:
    """Time out pending bookings past their expiry."""
    return run_async_in_new_loop(
        run_sweep(
            "expire_pending_jobs",
            lambda orchestrator: orchestrator.expire_pending_jobs(settings.SWEEP_BATCH_SIZE),
        )
    )


@celery_app.task(name="start_due_sessions_task")
def start_due_sessions_task() -> Dict[str, Any]:
    """Start assigned sessions whose time has come."""
    return run_async_in_new_loop(
        run_sweep(
            "start_due_sessions",
            lambda orchestrator: orchestrator.start_due_sessions(settings.SWEEP_BATCH_SIZE),
        )
    )
