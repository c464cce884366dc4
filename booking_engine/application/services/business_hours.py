"""
Night window used to defer pushes for users who opted out of night-time messages.
"""

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo


class NightWindow:
    """Local hours during which opted-out recipients must not be woken up."""

    def __init__(self, start_hour: int = 22, end_hour: int = 7, tz_name: str = "UTC"):
        if start_hour == end_hour:
            raise ValueError("Night window start and end hour must differ")
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.tz = ZoneInfo(tz_name)

    def contains(self, instant: datetime) -> bool:
        """Check if the instant falls inside the night window."""
        hour = instant.astimezone(self.tz).hour
        if self.start_hour > self.end_hour:
            return hour >= self.start_hour or hour < self.end_hour
        return self.start_hour <= hour < self.end_hour

    def next_business_time(self, instant: datetime) -> datetime:
        """First instant at or after ``instant`` that is outside the window (UTC)."""
        if not self.contains(instant):
            return instant

        local = instant.astimezone(self.tz)
        day = local.date()
        if local.hour >= self.end_hour:
            day = day + timedelta(days=1)
        morning = datetime.combine(day, time(hour=self.end_hour), tzinfo=self.tz)
        return morning.astimezone(timezone.utc)
