"""
Validation-related domain exceptions.
"""

from typing import Optional

from booking_engine.domain.exceptions.booking_error import BookingError


class ValidationFailedError(BookingError):
    """Raised when a request is missing data a transition requires."""

    def __init__(self, message: str, field_name: Optional[str] = None):
        self.field_name = field_name
        self.message = message
        super().__init__(message)


class RequiredFieldError(ValidationFailedError):
    """Raised when required field is missing."""

    def __init__(self, field_name: str):
        super().__init__(f"Required field '{field_name}' is missing", field_name)
