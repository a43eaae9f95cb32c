"""Participant-based access control for bookings.

A booking has exactly two participants: the booker and the offer owner.
Every action maps to the set of participant roles allowed to perform it.
This module is the only place that compares a principal against a
booking's participant ids.
"""

from enum import Enum
from typing import Protocol
from uuid import UUID

from skillswap.core.exceptions import AuthorizationError, SelfBookingError
from skillswap.domain.booking_state import BookingAction


class BookingRole(str, Enum):
    """A principal's role on a particular booking."""

    BOOKER = "booker"
    OWNER = "owner"

    @property
    def other(self) -> "BookingRole":
        return BookingRole.OWNER if self is BookingRole.BOOKER else BookingRole.BOOKER


class Participants(Protocol):
    booked_by_id: UUID
    offer_owner_id: UUID


# Action to permitted roles mapping
ACTION_ROLES: dict[BookingAction, frozenset[BookingRole]] = {
    BookingAction.VIEW: frozenset({BookingRole.BOOKER, BookingRole.OWNER}),
    BookingAction.ACCEPT: frozenset({BookingRole.OWNER}),
    BookingAction.REJECT: frozenset({BookingRole.OWNER}),
    BookingAction.CANCEL: frozenset({BookingRole.BOOKER}),
    BookingAction.MARK_COMPLETE: frozenset({BookingRole.BOOKER, BookingRole.OWNER}),
    BookingAction.WITHDRAW_COMPLETION: frozenset({BookingRole.BOOKER, BookingRole.OWNER}),
    BookingAction.RAISE_DISPUTE: frozenset({BookingRole.BOOKER, BookingRole.OWNER}),
}

DENIED_MESSAGES: dict[BookingAction, str] = {
    BookingAction.ACCEPT: "Only the offer owner can accept this booking",
    BookingAction.REJECT: "Only the offer owner can reject this booking",
    BookingAction.CANCEL: "Only the booker can cancel this booking",
}


def resolve_role(user_id: UUID, booking: Participants) -> BookingRole | None:
    """Return the principal's role on the booking, or None for outsiders."""
    if booking.booked_by_id == user_id:
        return BookingRole.BOOKER
    if booking.offer_owner_id == user_id:
        return BookingRole.OWNER
    return None


def has_permission(role: BookingRole | None, action: BookingAction) -> bool:
    """Check if a role may perform an action."""
    return role is not None and role in ACTION_ROLES.get(action, frozenset())


def authorize(user_id: UUID, booking: Participants, action: BookingAction) -> BookingRole:
    """Return the caller's role, or raise AuthorizationError.

    Runs before any state check so outsiders learn nothing about the
    booking's status.
    """
    role = resolve_role(user_id, booking)
    if not has_permission(role, action):
        if role is None:
            detail = "You are not a participant in this booking"
        else:
            detail = DENIED_MESSAGES[action]
        raise AuthorizationError(detail)
    return role


def authorize_create(user_id: UUID, offer_owner_id: UUID) -> None:
    """Anyone but the offer owner may book an offer."""
    if user_id == offer_owner_id:
        raise SelfBookingError()
