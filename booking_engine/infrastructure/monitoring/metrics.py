"""
Prometheus metrics for booking lifecycle monitoring.
"""

import os

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
    multiprocess,
)

from booking_engine.config.logging import get_logger

logger = get_logger(__name__)


def _create_registry() -> CollectorRegistry:
    """Single process registry, or a multiprocess one when Celery/uvicorn workers share a dir."""
    registry = CollectorRegistry()
    multiproc_dir = os.getenv("PROMETHEUS_MULTIPROC_DIR")
    if not multiproc_dir:
        return registry

    if not os.path.isdir(multiproc_dir) or not os.access(multiproc_dir, os.W_OK):
        logger.warning(
            "PROMETHEUS_MULTIPROC_DIR is not a writable directory, using single process registry",
            path=multiproc_dir,
        )
        return registry

    multiprocess.MultiProcessCollector(registry)
    return registry


registry = _create_registry()


def get_registry() -> CollectorRegistry:
    """Get the current registry."""
    return registry


def _get_metric(metric_class, *args, **kwargs):
    return metric_class(*args, **kwargs, registry=get_registry())


JOBS_CREATED = _get_metric(
    Counter,
    "booking_jobs_created_total",
    "Total number of bookings created",
    ["job_type", "immediate"],
)

JOB_TRANSITIONS = _get_metric(
    Counter,
    "booking_job_transitions_total",
    "Total number of applied job status transitions",
    ["from_status", "to_status"],
)

ASSIGNMENT_CONFLICTS = _get_metric(
    Counter,
    "booking_assignment_conflicts_total",
    "Acceptance attempts lost to another booking or translator",
    ["reason"],
)

NOTIFICATION_DISPATCHES = _get_metric(
    Counter,
    "booking_notification_dispatches_total",
    "Notification hand-offs to channel adapters",
    ["channel", "notification_type", "delayed"],
)

DELIVERY_FAILURES = _get_metric(
    Counter,
    "booking_delivery_failures_total",
    "Notification hand-offs that failed",
    ["channel", "notification_type"],
)

SWEEP_RUNS = _get_metric(
    Counter,
    "booking_sweep_runs_total",
    "Scheduled sweep executions",
    ["sweep", "status"],
)

API_REQUESTS = _get_metric(
    Counter,
    "api_requests_total",
    "Total number of API requests",
    ["method", "endpoint", "status_code"],
)

API_REQUEST_DURATION = _get_metric(
    Histogram,
    "api_request_duration_seconds",
    "Time spent processing API requests",
    ["method", "endpoint"],
    buckets=[0.05, 0.1, 0.5, 1.0, 2.0, 5.0, 10.0],
)


def record_job_creation(job_type: str, immediate: bool):
    """Record job creation metric."""
    JOBS_CREATED.labels(job_type=job_type, immediate=str(immediate).lower()).inc()


def record_transition(from_status: str, to_status: str):
    """Record an applied status transition."""
    JOB_TRANSITIONS.labels(from_status=from_status, to_status=to_status).inc()


def record_assignment_conflict(reason: str):
    """Record an acceptance that lost the race or collided with another booking."""
    ASSIGNMENT_CONFLICTS.labels(reason=reason).inc()


def record_dispatch(channel: str, notification_type: str, delayed: bool):
    """Record a notification hand-off."""
    NOTIFICATION_DISPATCHES.labels(
        channel=channel, notification_type=notification_type, delayed=str(delayed).lower()
    ).inc()


def record_delivery_failure(channel: str, notification_type: str):
    """Record a failed notification hand-off."""
    DELIVERY_FAILURES.labels(channel=channel, notification_type=notification_type).inc()


def record_sweep(sweep: str, status: str):
    """Record a scheduled sweep run."""
    SWEEP_RUNS.labels(sweep=sweep, status=status).inc()


def record_api_request(method: str, endpoint: str, status_code: int, duration: float):
    """Record API request metrics."""
    API_REQUESTS.labels(method=method, endpoint=endpoint, status_code=str(status_code)).inc()
    API_REQUEST_DURATION.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get Prometheus metrics in text format."""
    return generate_latest(get_registry())


def get_metrics_content_type() -> str:
    """Get Prometheus metrics content type."""
    return CONTENT_TYPE_LATEST
