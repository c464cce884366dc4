"""
Booking lifecycle domain exceptions.
"""

from datetime import datetime
from typing import Any, Optional


class BookingError(Exception):
    """Base exception for booking engine errors."""

    pass


class NotFoundError(BookingError):
    """Raised when a job, user or translator does not exist."""

    def __init__(self, entity: str, identifier: Any):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} '{identifier}' not found")


class InvalidTransitionError(BookingError):
    """Raised when a status change is not allowed from the current status."""

    def __init__(
        self, current_status: str, target_status: str, reason: Optional[str] = None
    ):
        self.current_status = _status_value(current_status)
        self.target_status = _status_value(target_status)
        self.reason = reason
        message = f"Cannot change job status from '{self.current_status}' to '{self.target_status}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class JobNotAcceptableError(InvalidTransitionError):
    """Raised when a translator tries to accept a job that is no longer pending."""

    def __init__(self, job_id: Any, current_status: str):
        self.job_id = job_id
        super().__init__(
            current_status, "assigned", f"job {job_id} is no longer open for acceptance"
        )


class AlreadyBookedError(BookingError):
    """Raised when a translator already holds a booking at the same time."""

    def __init__(self, translator_id: Any, due: Optional[datetime] = None):
        self.translator_id = translator_id
        self.due = due
        message = f"Translator {translator_id} already has a booking"
        if due:
            message += f" at {due.isoformat()}"
        super().__init__(message)


class JobBusyError(BookingError):
    """Raised when the per-job lock could not be obtained in time."""

    def __init__(self, job_id: Any, waited_seconds: float):
        self.job_id = job_id
        self.waited_seconds = waited_seconds
        super().__init__(
            f"Job {job_id} is being changed by another request (waited {waited_seconds}s)"
        )


def _status_value(status: Any) -> str:
    return str(getattr(status, "value", status))
