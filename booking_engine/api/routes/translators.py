"""Translator-facing API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Query

from booking_engine.api.dependencies import OrchestratorDep
from booking_engine.api.schemas.booking import BookingResponse

router = APIRouter(prefix="/translators", tags=["translators"])


@router.get("/{translator_id}/potential-jobs", response_model=List[BookingResponse])
async def potential_jobs(
    translator_id: UUID,
    orchestrator: OrchestratorDep,
    limit: int = Query(100, ge=1, le=500),
):
    """Open bookings the translator can accept."""
    jobs = await orchestrator.potential_jobs(translator_id, limit)
    return [BookingResponse.from_entity(job) for job in jobs]
