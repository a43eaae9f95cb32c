"""Core utilities and security modules."""

from skillswap.core.exceptions import (
    AlreadyConfirmed,
    AppException,
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    InvalidBookingStatus,
    NotFoundError,
    NothingToWithdraw,
    SelfBookingError,
    ValidationError,
)
from skillswap.core.security import (
    Principal,
    create_access_token,
    principal_from_token,
    verify_token,
)

__all__ = [
    "AlreadyConfirmed",
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "ConflictError",
    "ExternalServiceError",
    "InvalidBookingStatus",
    "NotFoundError",
    "NothingToWithdraw",
    "SelfBookingError",
    "ValidationError",
    "Principal",
    "create_access_token",
    "principal_from_token",
    "verify_token",
]
