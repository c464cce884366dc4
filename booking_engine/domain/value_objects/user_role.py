"""
User role and account status value objects.
"""

from enum import Enum


class UserRole(str, Enum):
    """Marketplace user role enumeration."""

    CUSTOMER = "customer"
    TRANSLATOR = "translator"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"

    def is_staff(self) -> bool:
        """Check if role may use the administrative edit path."""
        return self in [self.ADMIN, self.SUPERADMIN]


class UserStatus(str, Enum):
    """User account status enumeration."""

    ACTIVE = "active"
    DISABLED = "disabled"
