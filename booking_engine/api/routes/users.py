"""Customer and translator booking lists."""

from uuid import UUID

from fastapi import APIRouter, Query

from booking_engine.api.dependencies import OrchestratorDep
from booking_engine.api.schemas.booking import UserBookingsResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}/bookings", response_model=UserBookingsResponse)
async def user_bookings(
    user_id: UUID,
    orchestrator: OrchestratorDep,
    history: bool = Query(False, description="List closed bookings instead of current ones"),
    page: int = Query(1, ge=1),
    per_page: int = Query(15, ge=1, le=100),
):
    """A customer's own bookings, or the jobs a translator holds or has held."""
    result = await orchestrator.user_jobs(user_id, history, page, per_page)
    return UserBookingsResponse.from_result(result)
