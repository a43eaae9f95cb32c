"""Persistence for bookings.

Every write is a compare-and-swap on ``Booking.version``: SQLAlchemy issues
``UPDATE ... WHERE id = :id AND version = :read_version`` and raises
``StaleDataError`` when another request got there first.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from skillswap.core.exceptions import ConflictError, ExternalServiceError, NotFoundError
from skillswap.models.booking import Booking

logger = logging.getLogger(__name__)


class BookingStore:
    """Create, fetch, filter and update Booking records."""

    @staticmethod
    def _select():
        return select(Booking).options(
            selectinload(Booking.offer),
            selectinload(Booking.booked_by),
            selectinload(Booking.offer_owner),
        )

    async def create(self, db: AsyncSession, booking: Booking) -> Booking:
        """Insert a new booking and return it with its summaries loaded."""
        db.add(booking)
        await self._commit(db, booking)
        return await self.get(db, booking.id)

    async def get(self, db: AsyncSession, booking_id: UUID) -> Booking:
        """Get booking by ID or raise NotFoundError."""
        result = await db.execute(
            self._select()
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        booking = result.scalar_one_or_none()
        if not booking:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    async def list_by_booker(
        self, db: AsyncSession, user_id: UUID, status: str | None = None
    ) -> list[Booking]:
        """Bookings the user requested, newest first."""
        query = self._select().where(Booking.booked_by_id == user_id)
        return await self._list(db, query, status)

    async def list_by_owner(
        self, db: AsyncSession, user_id: UUID, status: str | None = None
    ) -> list[Booking]:
        """Bookings received on the user's offers, newest first."""
        query = self._select().where(Booking.offer_owner_id == user_id)
        return await self._list(db, query, status)

    async def save(self, db: AsyncSession, booking: Booking) -> Booking:
        """Persist the in-memory booking, failing if it changed since it was read."""
        await self._commit(db, booking)
        return booking

    async def _list(self, db: AsyncSession, query, status: str | None) -> list[Booking]:
        if status:
            query = query.where(Booking.status == status)
        result = await db.execute(query.order_by(Booking.created_at.desc()))
        return list(result.scalars().all())

    async def _commit(self, db: AsyncSession, booking: Booking) -> None:
        booking_id = booking.id  # rollback expires the instance
        try:
            await db.commit()
        except StaleDataError:
            await db.rollback()
            logger.info(f"Stale write rejected for booking {booking_id}")
            raise ConflictError()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to persist booking {booking_id}: {e}")
            raise ExternalServiceError("database")


booking_store = BookingStore()
