"""
System clock service.
"""

from datetime import datetime, timezone

from booking_engine.application.interfaces.services import ClockInterface


class SystemClock(ClockInterface):
    """Clock backed by the host's wall time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
