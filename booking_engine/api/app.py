"""
FastAPI application factory.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booking_engine.api.middleware.error_handler import ErrorHandlerMiddleware
from booking_engine.api.middleware.logging import LoggingMiddleware
from booking_engine.api.routes import bookings, health, translators, users
from booking_engine.config.logging import get_logger
from booking_engine.config.settings import settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Application startup",
        environment=settings.ENVIRONMENT,
        job_lock_backend=settings.JOB_LOCK_BACKEND,
        notification_timezone=settings.NOTIFICATION_TIMEZONE,
    )
    yield
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Booking lifecycle and translator matching service",
        openapi_url=f"{settings.API_PREFIX}/openapi.json" if settings.DEBUG else None,
        docs_url=f"{settings.API_PREFIX}/docs" if settings.DEBUG else None,
        redoc_url=f"{settings.API_PREFIX}/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    origins = settings.CORS_ORIGINS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[origins] if isinstance(origins, str) else origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom middleware
    ErrorHandlerMiddleware(app)
    LoggingMiddleware(app)

    # Add routes
    app.include_router(health.router, prefix=settings.API_PREFIX, tags=["health"])
    app.include_router(bookings.router, prefix=settings.API_PREFIX, tags=["bookings"])
    app.include_router(
        translators.router, prefix=settings.API_PREFIX, tags=["translators"]
    )
    app.include_router(users.router, prefix=settings.API_PREFIX, tags=["users"])

    return app
