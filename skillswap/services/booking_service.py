"""Booking engagement service.

Each operation runs the same pipeline inside one request: fetch the booking,
check the principal's role, apply the transition in memory, persist it with
compare-and-swap, then publish the resulting notifications. Publishing is
best-effort: once the booking is committed, a notification outage is logged
and the caller still gets the updated booking.
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.config import settings
from skillswap.core.exceptions import AuthenticationError, ExternalServiceError
from skillswap.core.permissions import BookingRole, authorize, authorize_create
from skillswap.core.security import Principal
from skillswap.domain.booking_lifecycle import BookingStateMachine, clean_dispute_reason
from skillswap.domain.booking_state import BookingAction, BookingStatus, owner_decision
from skillswap.domain.notifications import NotificationIntent
from skillswap.models.booking import Booking
from skillswap.models.user import User
from skillswap.services.booking_store import BookingStore, booking_store
from skillswap.services.notification_service import NotificationService, notification_service
from skillswap.services.offer_lookup import OfferLookup, offer_lookup

logger = logging.getLogger(__name__)


class BookingService:
    """Service for the booking lifecycle."""

    def __init__(
        self,
        store: BookingStore | None = None,
        offers: OfferLookup | None = None,
        notifier: NotificationService | None = None,
        state_machine: BookingStateMachine | None = None,
    ) -> None:
        self.store = store or booking_store
        self.offers = offers or offer_lookup
        self.notifier = notifier or notification_service
        self.state_machine = state_machine or BookingStateMachine(
            platform_name=settings.platform_name,
            dispute_preview_length=settings.dispute_preview_length,
        )

    # ==================== QUERIES ====================

    async def list_bookings(
        self,
        db: AsyncSession,
        principal: Principal,
        role: BookingRole = BookingRole.BOOKER,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Bookings the principal made (booker) or received (owner)."""
        status_value = status.value if status else None
        if role is BookingRole.OWNER:
            return await self.store.list_by_owner(db, principal.user_id, status_value)
        return await self.store.list_by_booker(db, principal.user_id, status_value)

    async def get_booking(self, db: AsyncSession, principal: Principal, booking_id: UUID) -> Booking:
        booking = await self.store.get(db, booking_id)
        authorize(principal.user_id, booking, BookingAction.VIEW)
        return booking

    # ==================== TRANSITIONS ====================

    async def create_booking(
        self,
        db: AsyncSession,
        principal: Principal,
        offer_id: UUID,
        message: str | None = None,
    ) -> Booking:
        """Request a booking on someone else's offer."""
        offer = await self.offers.get_offer(db, offer_id)
        authorize_create(principal.user_id, offer.owner_id)

        booker = await db.get(User, principal.user_id)
        if booker is None:
            raise AuthenticationError("User not found")

        booking, intents = self.state_machine.create(
            offer=offer,
            booker_id=principal.user_id,
            booker_name=booker.name,
            message=message,
        )
        booking = await self.store.create(db, booking)
        logger.info(f"Booking {booking.id} created by {principal.user_id} on offer {offer_id}")

        await self._publish(intents)
        return booking

    async def set_status(
        self,
        db: AsyncSession,
        principal: Principal,
        booking_id: UUID,
        target: str,
    ) -> Booking:
        """Owner accepts or rejects a pending request."""
        action = owner_decision(target)
        booking = await self.store.get(db, booking_id)
        authorize(principal.user_id, booking, action)

        intents = self.state_machine.set_status(booking, target)
        return await self._commit_transition(db, booking, intents, action, principal)

    async def cancel(self, db: AsyncSession, principal: Principal, booking_id: UUID) -> Booking:
        """Booker cancels a pending or accepted booking."""
        booking = await self.store.get(db, booking_id)
        authorize(principal.user_id, booking, BookingAction.CANCEL)

        intents = self.state_machine.cancel(booking)
        return await self._commit_transition(db, booking, intents, BookingAction.CANCEL, principal)

    async def mark_complete(
        self,
        db: AsyncSession,
        principal: Principal,
        booking_id: UUID,
        notes: str | None = None,
    ) -> Booking:
        """Record the principal's side of the completion handshake."""
        booking = await self.store.get(db, booking_id)
        role = authorize(principal.user_id, booking, BookingAction.MARK_COMPLETE)

        intents = self.state_machine.mark_complete(booking, role, notes)
        return await self._commit_transition(
            db, booking, intents, BookingAction.MARK_COMPLETE, principal
        )

    async def withdraw_completion(
        self, db: AsyncSession, principal: Principal, booking_id: UUID
    ) -> Booking:
        """Take back the principal's completion confirmation."""
        booking = await self.store.get(db, booking_id)
        role = authorize(principal.user_id, booking, BookingAction.WITHDRAW_COMPLETION)

        intents = self.state_machine.withdraw_completion(booking, role)
        return await self._commit_transition(
            db, booking, intents, BookingAction.WITHDRAW_COMPLETION, principal
        )

    async def raise_dispute(
        self,
        db: AsyncSession,
        principal: Principal,
        booking_id: UUID,
        reason: str,
    ) -> Booking:
        """Escalate an accepted or in-progress booking."""
        reason = clean_dispute_reason(reason)
        booking = await self.store.get(db, booking_id)
        role = authorize(principal.user_id, booking, BookingAction.RAISE_DISPUTE)

        intents = self.state_machine.raise_dispute(booking, role, reason)
        return await self._commit_transition(
            db, booking, intents, BookingAction.RAISE_DISPUTE, principal
        )

    # ==================== INTERNALS ====================

    async def _commit_transition(
        self,
        db: AsyncSession,
        booking: Booking,
        intents: list[NotificationIntent],
        action: BookingAction,
        principal: Principal,
    ) -> Booking:
        booking = await self.store.save(db, booking)
        logger.info(
            f"Booking {booking.id}: {action.value} by {principal.user_id} -> {booking.status}"
        )
        await self._publish(intents)
        return booking

    async def _publish(self, intents: list[NotificationIntent]) -> None:
        for intent in intents:
            try:
                await self.notifier.publish(intent)
            except ExternalServiceError:
                logger.exception(
                    f"Dropped {intent.kind.value} notification for user {intent.recipient_id}"
                )


booking_service = BookingService()
