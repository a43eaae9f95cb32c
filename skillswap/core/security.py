"""Bearer token handling.

Credentials are issued by the auth service; this service only verifies the
tokens and turns them into a :class:`Principal`. ``create_access_token`` is
kept for development scripts and tests that need to mint a token locally.
"""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID

from jose import JWTError, jwt

from skillswap.config import settings
from skillswap.core.exceptions import AuthenticationError


@dataclass(frozen=True)
class Principal:
    """The authenticated identity performing an operation."""

    user_id: UUID
    name: str | None = None


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str, token_type: str = "access") -> dict[str, Any]:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        raise AuthenticationError(f"Token validation failed: {str(e)}")
    if payload.get("type") != token_type:
        raise AuthenticationError("Invalid token type")
    return payload


def principal_from_token(token: str) -> Principal:
    """Decode an access token into a principal."""
    payload = verify_token(token, token_type="access")
    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError("Invalid token payload")
    try:
        user_id = UUID(subject)
    except ValueError:
        raise AuthenticationError("Invalid token subject")
    return Principal(user_id=user_id, name=payload.get("name"))
