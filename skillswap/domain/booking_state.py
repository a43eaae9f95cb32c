"""Booking state machine: statuses and the statuses each action may start from."""

from enum import Enum

from skillswap.core.exceptions import InvalidBookingStatus, ValidationError


class BookingStatus(str, Enum):
    """Lifecycle status of a booking."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    DISPUTED = "disputed"


class BookingAction(str, Enum):
    """Operations a participant can perform on a booking."""

    VIEW = "view"
    ACCEPT = "accept"
    REJECT = "reject"
    CANCEL = "cancel"
    MARK_COMPLETE = "mark_complete"
    WITHDRAW_COMPLETION = "withdraw_completion"
    RAISE_DISPUTE = "raise_dispute"


TERMINAL_STATUSES = frozenset(
    {BookingStatus.REJECTED, BookingStatus.CANCELLED, BookingStatus.COMPLETED}
)

ACTION_SOURCE_STATUSES: dict[BookingAction, frozenset[BookingStatus]] = {
    BookingAction.ACCEPT: frozenset({BookingStatus.PENDING}),
    BookingAction.REJECT: frozenset({BookingStatus.PENDING}),
    BookingAction.CANCEL: frozenset({BookingStatus.PENDING, BookingStatus.ACCEPTED}),
    BookingAction.MARK_COMPLETE: frozenset({BookingStatus.ACCEPTED, BookingStatus.IN_PROGRESS}),
    BookingAction.WITHDRAW_COMPLETION: frozenset({BookingStatus.IN_PROGRESS}),
    BookingAction.RAISE_DISPUTE: frozenset({BookingStatus.ACCEPTED, BookingStatus.IN_PROGRESS}),
}

# Targets an offer owner may pick when answering a pending request
OWNER_DECISIONS: dict[BookingStatus, BookingAction] = {
    BookingStatus.ACCEPTED: BookingAction.ACCEPT,
    BookingStatus.REJECTED: BookingAction.REJECT,
}

INVALID_STATE_MESSAGES: dict[BookingAction, str] = {
    BookingAction.ACCEPT: "Only pending bookings can be accepted",
    BookingAction.REJECT: "Only pending bookings can be rejected",
    BookingAction.CANCEL: "Only pending or accepted bookings can be cancelled",
    BookingAction.MARK_COMPLETE: "Only accepted or in-progress bookings can be marked as complete",
    BookingAction.WITHDRAW_COMPLETION: "Can only withdraw confirmation while booking is in progress",
    BookingAction.RAISE_DISPUTE: "Can only dispute accepted or in-progress bookings",
}


def can_perform(status: str, action: BookingAction) -> bool:
    """Whether ``action`` may start from ``status``."""
    return BookingStatus(status) in ACTION_SOURCE_STATUSES.get(action, frozenset())


def assert_action_allowed(status: str, action: BookingAction) -> None:
    """Raise InvalidBookingStatus unless ``action`` may start from ``status``."""
    if not can_perform(status, action):
        message = INVALID_STATE_MESSAGES.get(action, "Invalid booking transition")
        raise InvalidBookingStatus(f"{message} (current status: {status})")


def owner_decision(target: str) -> BookingAction:
    """Map the owner's requested status to the action it represents.

    Only ``accepted`` and ``rejected`` are answers to a booking request; any
    other status string is rejected rather than written verbatim.
    """
    try:
        return OWNER_DECISIONS[BookingStatus(target)]
    except (KeyError, ValueError):
        raise ValidationError(
            f"Invalid status '{target}'. A booking request can only be accepted or rejected"
        )
