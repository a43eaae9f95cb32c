"""Notification endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.api.deps import get_current_principal, get_db, get_notification_service
from skillswap.core.security import Principal
from skillswap.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from skillswap.services.notification_service import NotificationService

router = APIRouter()


@router.get("/", response_model=NotificationListResponse)
async def get_notifications(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[NotificationService, Depends(get_notification_service)],
    unread_only: bool = Query(default=False),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
) -> NotificationListResponse:
    """Get user's notifications."""
    notifications, total, unread_count = await service.list_for_user(
        db, principal.user_id, unread_only, page, page_size
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        total=total,
        unread_count=unread_count,
        page=page,
        page_size=page_size,
    )


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[NotificationService, Depends(get_notification_service)],
) -> NotificationResponse:
    """Mark a notification as read."""
    notification = await service.mark_read(db, principal.user_id, notification_id)
    return NotificationResponse.model_validate(notification)


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_notifications_read(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[NotificationService, Depends(get_notification_service)],
) -> MarkAllReadResponse:
    """Mark all notifications as read."""
    updated = await service.mark_all_read(db, principal.user_id)
    return MarkAllReadResponse(updated=updated)


@router.delete("/{notification_id}", status_code=204)
async def delete_notification(
    notification_id: UUID,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db)],
    service: Annotated[NotificationService, Depends(get_notification_service)],
) -> None:
    """Delete a notification."""
    await service.delete(db, principal.user_id, notification_id)
