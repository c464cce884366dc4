"""
Request logging middleware.

Every request gets a request id (taken from ``X-Request-ID`` when the
caller supplies one) which is bound to the structlog context, so log lines
emitted by use cases and the dispatcher carry it too.
"""

import time
import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response

from booking_engine.config.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
)
from booking_engine.config.settings import settings
from booking_engine.infrastructure.monitoring.metrics import record_api_request

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _route_template(request: Request) -> str:
    # Keeps metric labels bounded: /bookings/{job_id} rather than each id
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class LoggingMiddleware:
    """Binds a request id and logs one line per finished request."""

    def __init__(self, app: FastAPI):
        self.app = app
        self.add_logging_middleware()

    def add_logging_middleware(self) -> None:
        @self.app.middleware("http")
        async def logging_middleware(request: Request, call_next: Callable) -> Response:
            request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
            request.state.request_id = request_id
            clear_request_context()
            bind_request_context(request_id=request_id)
            started = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as e:
                logger.error(
                    "Request crashed",
                    method=request.method,
                    path=request.url.path,
                    error=str(e),
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                )
                raise

            elapsed = time.perf_counter() - started
            log = logger.warning if response.status_code >= 500 else logger.info
            log(
                "Request handled",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round(elapsed * 1000, 1),
            )

            if settings.ENABLE_METRICS:
                record_api_request(
                    request.method, _route_template(request), response.status_code, elapsed
                )

            response.headers[REQUEST_ID_HEADER] = request_id
            return response
