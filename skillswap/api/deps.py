"""API dependencies for authentication and common operations."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from skillswap.core.exceptions import AuthenticationError
from skillswap.core.security import Principal, principal_from_token
from skillswap.database import get_db
from skillswap.services.booking_service import BookingService, booking_service
from skillswap.services.notification_service import NotificationService, notification_service

__all__ = [
    "get_booking_service",
    "get_current_principal",
    "get_db",
    "get_notification_service",
]

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_principal(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Principal:
    """Get the authenticated principal from the bearer token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return principal_from_token(credentials.credentials)


def get_booking_service() -> BookingService:
    return booking_service


def get_notification_service() -> NotificationService:
    return notification_service
