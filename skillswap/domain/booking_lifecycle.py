"""Booking engagement lifecycle.

``BookingStateMachine`` applies one transition to an in-memory booking and
returns the notifications that transition raises. It never touches the
database or the notification store: the caller persists the booking first
and publishes the returned intents afterwards.

Completion requires both participants to confirm independently. The first
confirmation moves the booking to ``in_progress``; the second completes it.
A confirmation can be withdrawn until the other side confirms, and
withdrawing the only confirmation returns the booking to ``accepted``.
"""

from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID, uuid4

from skillswap.core.exceptions import (
    AlreadyConfirmed,
    NothingToWithdraw,
    ValidationError,
)
from skillswap.core.permissions import BookingRole
from skillswap.domain import notifications
from skillswap.domain.booking_state import (
    BookingAction,
    BookingStatus,
    assert_action_allowed,
    owner_decision,
)
from skillswap.domain.notifications import (
    BOOKER_BOOKINGS_URL,
    OWNER_BOOKINGS_URL,
    NotificationIntent,
)
from skillswap.models.booking import Booking
from skillswap.models.offer import Offer

MIN_DISPUTE_REASON_LENGTH = 10

PARTY_BOOKINGS_URL = {
    BookingRole.BOOKER: BOOKER_BOOKINGS_URL,
    BookingRole.OWNER: OWNER_BOOKINGS_URL,
}


def clean_dispute_reason(reason: str | None) -> str:
    """Strip the reason and reject anything too short to act on."""
    cleaned = (reason or "").strip()
    if len(cleaned) < MIN_DISPUTE_REASON_LENGTH:
        raise ValidationError(
            "Please provide a detailed reason for the dispute "
            f"(at least {MIN_DISPUTE_REASON_LENGTH} characters)"
        )
    return cleaned


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BookingStateMachine:
    """Validates and applies booking transitions."""

    def __init__(
        self,
        platform_name: str = "SkillSwap",
        dispute_preview_length: int = 50,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.platform_name = platform_name
        self.dispute_preview_length = dispute_preview_length
        self.clock = clock

    # ==================== PARTY HELPERS ====================

    @staticmethod
    def _party_id(booking: Booking, role: BookingRole) -> UUID:
        return booking.booked_by_id if role is BookingRole.BOOKER else booking.offer_owner_id

    @staticmethod
    def _party_name(booking: Booking, role: BookingRole) -> str:
        user = booking.booked_by if role is BookingRole.BOOKER else booking.offer_owner
        if user is None:
            return "The booker" if role is BookingRole.BOOKER else "The offer owner"
        return user.name

    @staticmethod
    def _offer_title(booking: Booking) -> str:
        return booking.offer.title if booking.offer is not None else "your booking"

    @staticmethod
    def _has_confirmed(booking: Booking, role: BookingRole) -> bool:
        if role is BookingRole.BOOKER:
            return bool(booking.completed_by_booker)
        return bool(booking.completed_by_owner)

    def _set_confirmation(self, booking: Booking, role: BookingRole, confirmed: bool) -> None:
        confirmed_at = self.clock() if confirmed else None
        if role is BookingRole.BOOKER:
            booking.completed_by_booker = confirmed
            booking.booker_confirmed_at = confirmed_at
        else:
            booking.completed_by_owner = confirmed
            booking.owner_confirmed_at = confirmed_at

    # ==================== TRANSITIONS ====================

    def create(
        self,
        offer: Offer,
        booker_id: UUID,
        booker_name: str,
        message: str | None = None,
    ) -> tuple[Booking, list[NotificationIntent]]:
        """Build a new pending booking; the caller has already ruled out self-booking."""
        now = self.clock()
        booking = Booking(
            id=uuid4(),
            offer_id=offer.id,
            offer_owner_id=offer.owner_id,
            booked_by_id=booker_id,
            status=BookingStatus.PENDING.value,
            message=(message or "").strip(),
            completed_by_booker=False,
            completed_by_owner=False,
            booker_confirmed_at=None,
            owner_confirmed_at=None,
            completed_at=None,
            session_notes="",
            dispute_reason="",
            disputed_by_id=None,
            disputed_at=None,
            created_at=now,
            updated_at=now,
        )
        intent = notifications.booking_requested(
            owner_id=offer.owner_id,
            offer_id=offer.id,
            offer_title=offer.title,
            booker_name=booker_name,
            booking_id=booking.id,
        )
        return booking, [intent]

    def set_status(self, booking: Booking, target: str) -> list[NotificationIntent]:
        """Owner's answer to a pending request: accepted or rejected."""
        assert_action_allowed(booking.status, owner_decision(target))

        booking.status = BookingStatus(target).value
        return [
            notifications.booking_decided(
                booker_id=booking.booked_by_id,
                booking_id=booking.id,
                offer_title=self._offer_title(booking),
                status=booking.status,
            )
        ]

    def cancel(self, booking: Booking) -> list[NotificationIntent]:
        """Booker withdraws the request before the engagement starts."""
        assert_action_allowed(booking.status, BookingAction.CANCEL)
        booking.status = BookingStatus.CANCELLED.value
        return []

    def mark_complete(
        self,
        booking: Booking,
        role: BookingRole,
        notes: str | None = None,
    ) -> list[NotificationIntent]:
        """Record one party's completion confirmation."""
        assert_action_allowed(booking.status, BookingAction.MARK_COMPLETE)
        if self._has_confirmed(booking, role):
            raise AlreadyConfirmed()

        if not booking.completed_by_booker and not booking.completed_by_owner:
            booking.status = BookingStatus.IN_PROGRESS.value

        self._set_confirmation(booking, role, True)

        notes = (notes or "").strip()
        if notes:
            # Booker's notes win; the owner's only fill an empty slot.
            if role is BookingRole.BOOKER or not booking.session_notes:
                booking.session_notes = notes

        other = role.other
        offer_title = self._offer_title(booking)
        intents = [
            notifications.completion_confirmed(
                recipient_id=self._party_id(booking, other),
                recipient_link=PARTY_BOOKINGS_URL[other],
                booking_id=booking.id,
                offer_title=offer_title,
                actor_name=self._party_name(booking, role),
            )
        ]

        if booking.completed_by_booker and booking.completed_by_owner:
            booking.status = BookingStatus.COMPLETED.value
            booking.completed_at = self.clock()
            intents.extend(
                notifications.engagement_completed(
                    booker_id=booking.booked_by_id,
                    owner_id=booking.offer_owner_id,
                    booking_id=booking.id,
                    offer_id=booking.offer_id,
                    offer_title=offer_title,
                    app_name=self.platform_name,
                )
            )

        return intents

    def withdraw_completion(self, booking: Booking, role: BookingRole) -> list[NotificationIntent]:
        """Take back a completion confirmation before the other side confirms."""
        assert_action_allowed(booking.status, BookingAction.WITHDRAW_COMPLETION)
        if not self._has_confirmed(booking, role):
            raise NothingToWithdraw()

        self._set_confirmation(booking, role, False)

        if not booking.completed_by_booker and not booking.completed_by_owner:
            booking.status = BookingStatus.ACCEPTED.value

        other = role.other
        return [
            notifications.completion_withdrawn(
                recipient_id=self._party_id(booking, other),
                recipient_link=PARTY_BOOKINGS_URL[other],
                booking_id=booking.id,
                offer_title=self._offer_title(booking),
                actor_name=self._party_name(booking, role),
            )
        ]

    def raise_dispute(self, booking: Booking, role: BookingRole, reason: str) -> list[NotificationIntent]:
        """Escalate an accepted or in-progress engagement."""
        cleaned = clean_dispute_reason(reason)
        assert_action_allowed(booking.status, BookingAction.RAISE_DISPUTE)

        booking.status = BookingStatus.DISPUTED.value
        booking.dispute_reason = cleaned
        booking.disputed_by_id = self._party_id(booking, role)
        booking.disputed_at = self.clock()

        other = role.other
        return [
            notifications.dispute_raised(
                recipient_id=self._party_id(booking, other),
                recipient_link=PARTY_BOOKINGS_URL[other],
                booking_id=booking.id,
                offer_title=self._offer_title(booking),
                actor_name=self._party_name(booking, role),
                reason_preview=notifications.preview(cleaned, self.dispute_preview_length),
            )
        ]
