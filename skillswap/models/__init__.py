"""Database models."""

from skillswap.models.booking import Booking
from skillswap.models.notification import Notification
from skillswap.models.offer import Offer
from skillswap.models.user import User

__all__ = [
    "Booking",
    "Notification",
    "Offer",
    "User",
]
