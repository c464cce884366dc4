"""Booking use cases."""

from .accept_job import AcceptJobRequest, AcceptJobResult, AcceptJobUseCase
from .booking_orchestrator import BookingOrchestrator
from .cancel_job import CancelJobRequest, CancelJobResult, CancelJobUseCase
from .create_job import CreateJobRequest, CreateJobResult, CreateJobUseCase
from .customer_not_call import (
    CustomerNotCallRequest,
    CustomerNotCallResult,
    CustomerNotCallUseCase,
)
from .end_job import EndJobRequest, EndJobResult, EndJobUseCase
from .expire_pending_jobs import ExpirePendingJobsUseCase, SweepResult
from .get_potential_jobs import GetPotentialJobsUseCase
from .get_user_jobs import GetUserJobsUseCase, UserJobsResult
from .reopen_job import ReopenJobRequest, ReopenJobResult, ReopenJobUseCase
from .resend_notifications import ResendNotificationsResult, ResendNotificationsUseCase
from .start_due_sessions import StartDueSessionsUseCase
from .update_job import UpdateJobRequest, UpdateJobResult, UpdateJobUseCase

__all__ = [
    "AcceptJobRequest",
    "AcceptJobResult",
    "AcceptJobUseCase",
    "BookingOrchestrator",
    "CancelJobRequest",
    "CancelJobResult",
    "CancelJobUseCase",
    "CreateJobRequest",
    "CreateJobResult",
    "CreateJobUseCase",
    "CustomerNotCallRequest",
    "CustomerNotCallResult",
    "CustomerNotCallUseCase",
    "EndJobRequest",
    "EndJobResult",
    "EndJobUseCase",
    "ExpirePendingJobsUseCase",
    "GetPotentialJobsUseCase",
    "GetUserJobsUseCase",
    "ReopenJobRequest",
    "ReopenJobResult",
    "ReopenJobUseCase",
    "ResendNotificationsResult",
    "ResendNotificationsUseCase",
    "StartDueSessionsUseCase",
    "SweepResult",
    "UpdateJobRequest",
    "UpdateJobResult",
    "UpdateJobUseCase",
    "UserJobsResult",
]
