"""
Main application entry point.
"""

from booking_engine.api.app import create_app
from booking_engine.config.logging import configure_logging, get_logger
from booking_engine.config.settings import settings

configure_logging()
logger = get_logger(__name__)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    logger.info("Starting booking engine server", host=settings.API_HOST, port=settings.API_PORT)

    uvicorn.run(
        "booking_engine.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
