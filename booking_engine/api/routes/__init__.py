"""
API routes package.
"""

from .bookings import router as bookings_router
from .health import router as health_router
from .translators import router as translators_router
from .users import router as users_router

__all__ = [
    "bookings_router",
    "health_router",
    "translators_router",
    "users_router",
]
