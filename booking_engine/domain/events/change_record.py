"""
Job change record event.
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ChangeRecord:
    """Audit entry for a single changed job attribute."""

    field: str
    old_value: Any
    new_value: Any

    def as_log_fields(self) -> dict:
        return {
            "field": self.field,
            "old_value": _loggable(self.old_value),
            "new_value": _loggable(self.new_value),
        }


def _loggable(value: Any) -> Any:
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return str(value)
