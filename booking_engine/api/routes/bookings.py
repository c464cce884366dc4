"""Booking lifecycle API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, status

from booking_engine.api.dependencies import OrchestratorDep
from booking_engine.api.schemas.booking import (
    AcceptBookingResponse,
    AcceptRequest,
    ActorRequest,
    AssignmentResponse,
    BookingActionResponse,
    BookingCreateRequest,
    BookingResponse,
    BookingUpdateRequest,
    ChangeSchema,
    CreateBookingResponse,
    ReopenBookingResponse,
    ResendRequest,
    ResendResponse,
    UpdateBookingResponse,
)
from booking_engine.api.schemas.common import DispatchSummary
from booking_engine.application.use_cases import (
    AcceptJobRequest,
    CancelJobRequest,
    CreateJobRequest,
    CustomerNotCallRequest,
    EndJobRequest,
    ReopenJobRequest,
    UpdateJobRequest,
)
from booking_engine.config.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])


def _action_response(job, report) -> dict:
    return {
        "booking": BookingResponse.from_entity(job),
        "notifications": DispatchSummary.from_report(report),
    }


@router.post("/", response_model=CreateBookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(payload: BookingCreateRequest, orchestrator: OrchestratorDep):
    """Create a booking and offer it to suitable translators."""
    result = await orchestrator.create_job(CreateJobRequest(**payload.model_dump()))
    return CreateBookingResponse(
        **_action_response(result.job, result.report),
        notified_translators=result.notified_translators,
    )


@router.get("/{job_id}", response_model=BookingResponse)
async def get_booking(job_id: UUID, orchestrator: OrchestratorDep):
    """Get a booking."""
    return BookingResponse.from_entity(await orchestrator.get_job(job_id))


@router.patch("/{job_id}", response_model=UpdateBookingResponse)
async def update_booking(
    job_id: UUID, payload: BookingUpdateRequest, orchestrator: OrchestratorDep
):
    """Administrative edit of status, time, language or translator."""
    result = await orchestrator.update_job(
        UpdateJobRequest(job_id=job_id, **payload.model_dump())
    )
    return UpdateBookingResponse(
        **_action_response(result.job, result.report),
        changes=[ChangeSchema.from_record(change) for change in result.changes],
    )


@router.post("/{job_id}/accept", response_model=AcceptBookingResponse)
async def accept_booking(job_id: UUID, payload: AcceptRequest, orchestrator: OrchestratorDep):
    """Bind a translator to a pending booking."""
    result = await orchestrator.accept_job(
        AcceptJobRequest(job_id=job_id, translator_id=payload.translator_id)
    )
    return AcceptBookingResponse(
        **_action_response(result.job, result.report),
        assignment=AssignmentResponse.from_entity(result.assignment),
    )


@router.post("/{job_id}/cancel", response_model=BookingActionResponse)
async def cancel_booking(job_id: UUID, payload: ActorRequest, orchestrator: OrchestratorDep):
    """Cancel a booking as its customer or its translator."""
    result = await orchestrator.cancel_job(
        CancelJobRequest(job_id=job_id, user_id=payload.user_id)
    )
    return BookingActionResponse(**_action_response(result.job, result.report))


@router.post("/{job_id}/end", response_model=BookingActionResponse)
async def end_booking(job_id: UUID, payload: ActorRequest, orchestrator: OrchestratorDep):
    """End a started session."""
    result = await orchestrator.end_job(EndJobRequest(job_id=job_id, user_id=payload.user_id))
    return BookingActionResponse(**_action_response(result.job, result.report))


@router.post("/{job_id}/customer-not-call", response_model=BookingActionResponse)
async def customer_not_call(
    job_id: UUID, payload: ActorRequest, orchestrator: OrchestratorDep
):
    """Report that the customer never showed up."""
    result = await orchestrator.customer_not_call(
        CustomerNotCallRequest(job_id=job_id, user_id=payload.user_id)
    )
    return BookingActionResponse(**_action_response(result.job, result.report))


@router.post("/{job_id}/reopen", response_model=ReopenBookingResponse)
async def reopen_booking(job_id: UUID, payload: ActorRequest, orchestrator: OrchestratorDep):
    """Put a booking back on the market."""
    result = await orchestrator.reopen_job(
        ReopenJobRequest(job_id=job_id, user_id=payload.user_id)
    )
    return ReopenBookingResponse(
        **_action_response(result.job, result.report), created_new=result.created_new
    )


@router.post("/{job_id}/resend-notifications", response_model=ResendResponse)
async def resend_notifications(
    job_id: UUID, payload: ResendRequest, orchestrator: OrchestratorDep
):
    """Offer a pending booking again by push or SMS."""
    result = await orchestrator.resend_notifications(job_id, payload.channel)
    return ResendResponse(
        recipients=result.recipients,
        notifications=DispatchSummary.from_report(result.report),
    )


@router.get("/{job_id}/assignments", response_model=List[AssignmentResponse])
async def list_assignments(job_id: UUID, orchestrator: OrchestratorDep):
    """Assignment history of a booking, oldest first."""
    await orchestrator.get_job(job_id)
    history = await orchestrator.assignment_history(job_id)
    return [AssignmentResponse.from_entity(assignment) for assignment in history]
