"""
Notification delivery exceptions.
"""

from booking_engine.domain.exceptions.booking_error import BookingError


class DeliveryFailedError(BookingError):
    """Raised by channel adapters when a message could not be handed off."""

    def __init__(self, channel: str, recipient: str, reason: str):
        self.channel = channel
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Delivery via {channel} to {recipient} failed: {reason}")
