"""
Error handling middleware.
"""

import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from booking_engine.config.logging import get_logger
from booking_engine.domain.exceptions.booking_error import (
    AlreadyBookedError,
    BookingError,
    InvalidTransitionError,
    JobBusyError,
    NotFoundError,
)
from booking_engine.domain.exceptions.validation_error import ValidationFailedError

logger = get_logger(__name__)


class ErrorHandlerMiddleware:
    """Error handling middleware for FastAPI."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_error_handlers()

    def add_error_handlers(self) -> None:
        """Add custom error handlers to FastAPI app."""
        add_error_handlers(self.app)


def _error(status_code: int, error: str, exc: Exception, error_type: str, **extra):
    content = {"error": error, "message": str(exc), "type": error_type}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def add_error_handlers(app: FastAPI) -> None:
    """Add custom error handlers to FastAPI app."""

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        logger.info("Entity not found", error=str(exc), path=request.url.path)
        return _error(404, "Not Found", exc, "not_found")

    @app.exception_handler(ValidationFailedError)
    async def validation_error_handler(request: Request, exc: ValidationFailedError):
        logger.warning("Validation error", error=str(exc), path=request.url.path)
        return _error(400, "Validation Error", exc, "validation_error", field=exc.field_name)

    @app.exception_handler(AlreadyBookedError)
    async def already_booked_handler(request: Request, exc: AlreadyBookedError):
        # Routine outcome of two bookings at the same time, not a fault
        logger.info("Translator already booked", error=str(exc), path=request.url.path)
        return _error(409, "Already Booked", exc, "already_booked")

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        logger.info("Invalid transition", error=str(exc), path=request.url.path)
        return _error(
            409,
            "Invalid Transition",
            exc,
            "invalid_transition",
            current_status=exc.current_status,
            target_status=exc.target_status,
        )

    @app.exception_handler(JobBusyError)
    async def job_busy_handler(request: Request, exc: JobBusyError):
        logger.warning("Job busy", error=str(exc), path=request.url.path)
        return _error(409, "Job Busy", exc, "job_busy")

    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError):
        logger.warning("Booking error", error=str(exc), path=request.url.path)
        return _error(400, "Booking Error", exc, "booking_error")

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error", error=str(exc), path=request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Database Error",
                "message": "A database error occurred",
                "type": "database_error",
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": "HTTP Error",
                "message": exc.detail,
                "type": "http_error",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled exception",
            error=str(exc),
            path=request.url.path,
            traceback=traceback.format_exc(),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "message": "An unexpected error occurred",
                "type": "internal_error",
            },
        )
