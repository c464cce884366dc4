"""
Session time value object.
"""

import re
from dataclasses import dataclass
from datetime import timedelta

_PATTERN = re.compile(r"^(\d+):([0-5]\d):([0-5]\d)$")


@dataclass(frozen=True)
class SessionTime:
    """Length of an interpretation session, stored as "H:MM:SS"."""

    total_seconds: int

    def __post_init__(self):
        if self.total_seconds < 0:
            raise ValueError("Session time cannot be negative")

    @classmethod
    def parse(cls, value: str) -> "SessionTime":
        """Parse an "H:MM:SS" string."""
        match = _PATTERN.match((value or "").strip())
        if not match:
            raise ValueError(f"Invalid session time '{value}', expected H:MM:SS")
        hours, minutes, seconds = (int(part) for part in match.groups())
        return cls(hours * 3600 + minutes * 60 + seconds)

    @classmethod
    def from_interval(cls, interval: timedelta) -> "SessionTime":
        """Build a session time from the elapsed interval."""
        return cls(max(0, int(interval.total_seconds())))

    @property
    def minutes(self) -> int:
        return self.total_seconds // 60

    def __str__(self) -> str:
        hours, remainder = divmod(self.total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours}:{minutes:02d}:{seconds:02d}"

    def display(self) -> str:
        """Human readable form used in mails, e.g. "1h 05min"."""
        return format_minutes(self.minutes)


def format_minutes(total_minutes: int) -> str:
    """Format a minute count as "45min" or "2h 05min"."""
    if total_minutes < 60:
        return f"{total_minutes}min"
    hours, minutes = divmod(total_minutes, 60)
    if minutes == 0:
        return f"{hours}h"
    return f"{hours}h {minutes:02d}min"
