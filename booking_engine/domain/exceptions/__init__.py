"""
Domain exceptions package.
"""

from .booking_error import (
    AlreadyBookedError,
    BookingError,
    InvalidTransitionError,
    JobBusyError,
    JobNotAcceptableError,
    NotFoundError,
)
from .delivery_error import DeliveryFailedError
from .validation_error import RequiredFieldError, ValidationFailedError

__all__ = [
    "AlreadyBookedError",
    "BookingError",
    "DeliveryFailedError",
    "InvalidTransitionError",
    "JobBusyError",
    "JobNotAcceptableError",
    "NotFoundError",
    "RequiredFieldError",
    "ValidationFailedError",
]
