"""Notification publisher and in-app notification read model.

Publishing writes the notification in its own session, separate from the
request's unit of work, so it can only run after the booking change it
describes has been committed. Clients poll the read model; there is no push
delivery.
"""

import asyncio
import logging
from datetime import UTC, datetime
from uuid import UUID

import asyncpg
from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from skillswap.core.exceptions import ExternalServiceError, NotFoundError
from skillswap.domain.notifications import NotificationIntent
from skillswap.models.notification import Notification

logger = logging.getLogger(__name__)

# Errors raised while connecting reach us unwrapped by SQLAlchemy
STORE_ERRORS = (
    SQLAlchemyError,
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


class NotificationService:
    """Stores notifications and serves them back to their recipients."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None) -> None:
        self._session_factory = session_factory

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Lazy-load the application session factory."""
        if self._session_factory is None:
            from skillswap.database import async_session_maker

            self._session_factory = async_session_maker
        return self._session_factory

    # ==================== PUBLISHING ====================

    async def publish(self, intent: NotificationIntent) -> Notification:
        """Store a notification for later retrieval.

        Raises:
            ExternalServiceError: If the notification store is unavailable
        """
        notification = Notification(
            user_id=intent.recipient_id,
            notification_type=intent.kind.value,
            title=intent.title,
            body=intent.body,
            action_url=intent.link,
            booking_id=intent.booking_id,
            is_read=False,
        )
        try:
            async with self.session_factory() as db:
                db.add(notification)
                await db.commit()
        except STORE_ERRORS as e:
            raise ExternalServiceError("notifications", str(e))

        logger.debug(f"Stored {intent.kind.value} notification for user {intent.recipient_id}")
        return notification

    # ==================== READ MODEL ====================

    async def list_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        unread_only: bool = False,
        page: int = 1,
        page_size: int = 20,
    ) -> tuple[list[Notification], int, int]:
        """Return one page of notifications, the total and the unread count."""
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712

        count_result = await db.execute(select(func.count()).select_from(query.subquery()))
        total = count_result.scalar() or 0

        unread_result = await db.execute(
            select(func.count()).where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
        )
        unread_count = unread_result.scalar() or 0

        offset = (page - 1) * page_size
        query = query.order_by(Notification.created_at.desc()).offset(offset).limit(page_size)
        result = await db.execute(query)
        return list(result.scalars().all()), total, unread_count

    async def mark_read(self, db: AsyncSession, user_id: UUID, notification_id: UUID) -> Notification:
        """Mark one of the user's notifications as read."""
        notification = await self._get_owned(db, user_id, notification_id)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = datetime.now(UTC)
            await db.flush()
        return notification

    async def mark_all_read(self, db: AsyncSession, user_id: UUID) -> int:
        """Mark every unread notification of the user as read; return how many changed."""
        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read == False,  # noqa: E712
            )
            .values(is_read=True, read_at=datetime.now(UTC))
        )
        return result.rowcount or 0

    async def delete(self, db: AsyncSession, user_id: UUID, notification_id: UUID) -> None:
        """Delete one of the user's notifications."""
        notification = await self._get_owned(db, user_id, notification_id)
        await db.execute(delete(Notification).where(Notification.id == notification.id))

    async def _get_owned(self, db: AsyncSession, user_id: UUID, notification_id: UUID) -> Notification:
        # Someone else's notification is reported exactly like a missing one
        result = await db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        notification = result.scalar_one_or_none()
        if not notification:
            raise NotFoundError("Notification", str(notification_id))
        return notification


notification_service = NotificationService()
