"""
API schemas for the booking engine.
"""

from .booking import (
    AcceptBookingResponse,
    AcceptRequest,
    ActorRequest,
    AssignmentResponse,
    BookingActionResponse,
    BookingCreateRequest,
    BookingResponse,
    BookingUpdateRequest,
    CreateBookingResponse,
    ReopenBookingResponse,
    ResendRequest,
    ResendResponse,
    UpdateBookingResponse,
    UserBookingsResponse,
)
from .common import DispatchSummary, ErrorResponse

__all__ = [
    "AcceptBookingResponse",
    "AcceptRequest",
    "ActorRequest",
    "AssignmentResponse",
    "BookingActionResponse",
    "BookingCreateRequest",
    "BookingResponse",
    "BookingUpdateRequest",
    "CreateBookingResponse",
    "DispatchSummary",
    "ErrorResponse",
    "ReopenBookingResponse",
    "ResendRequest",
    "ResendResponse",
    "UpdateBookingResponse",
    "UserBookingsResponse",
]
