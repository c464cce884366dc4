"""
FastAPI dependency injection container.
"""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booking_engine.application.use_cases.booking_orchestrator import (
    BookingOrchestrator,
)
from booking_engine.config.database import get_db_session
from booking_engine.infrastructure.container import build_orchestrator


async def get_orchestrator(
    db: AsyncSession = Depends(get_db_session),
) -> BookingOrchestrator:
    """Get a booking orchestrator bound to the request's session."""
    return build_orchestrator(db)


# Type aliases for cleaner dependency injection
OrchestratorDep = Annotated[BookingOrchestrator, Depends(get_orchestrator)]
