"""Pydantic schemas for API validation."""

from skillswap.schemas.booking import (
    BookingCompleteRequest,
    BookingCreate,
    BookingDisputeRequest,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
    OfferSummary,
    UserSummary,
)
from skillswap.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)

__all__ = [
    "BookingCompleteRequest",
    "BookingCreate",
    "BookingDisputeRequest",
    "BookingListResponse",
    "BookingResponse",
    "BookingStatusUpdate",
    "OfferSummary",
    "UserSummary",
    "MarkAllReadResponse",
    "NotificationListResponse",
    "NotificationResponse",
]
