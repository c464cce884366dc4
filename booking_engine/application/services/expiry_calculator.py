"""
Expiry calculation for pending bookings.
"""

from datetime import datetime, timedelta

IMMEDIATE_WINDOW = timedelta(minutes=90)
SHORT_NOTICE_WINDOW = timedelta(hours=24)
MEDIUM_NOTICE_WINDOW = timedelta(hours=72)

SHORT_NOTICE_EXPIRY = timedelta(minutes=90)
MEDIUM_NOTICE_EXPIRY = timedelta(hours=16)
LONG_NOTICE_MARGIN = timedelta(hours=48)


def will_expire_at(due: datetime, created_at: datetime) -> datetime:
    """
    Compute when an unaccepted booking times out.

    The tier is chosen from the notice the customer gave, i.e. the gap
    between creation and the session start:

    - up to 90 minutes: the booking stays open until it is due
    - up to 24 hours: open for 90 minutes after creation
    - up to 72 hours: open for 16 hours after creation
    - longer: closes 48 hours before it is due

    Args:
        due: Session start time.
        created_at: Time the booking was created (or reopened).

    Returns:
        The expiry timestamp, in the timezone of the arguments.
    """
    gap = due - created_at

    if gap <= IMMEDIATE_WINDOW:
        return due
    if gap <= SHORT_NOTICE_WINDOW:
        return created_at + SHORT_NOTICE_EXPIRY
    if gap <= MEDIUM_NOTICE_WINDOW:
        return created_at + MEDIUM_NOTICE_EXPIRY
    return due - LONG_NOTICE_MARGIN
