"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.api.deps import get_booking_service, get_current_principal, get_db
from skillswap.core.permissions import BookingRole
from skillswap.core.security import Principal
from skillswap.domain.booking_state import BookingStatus
from skillswap.schemas.booking import (
    BookingCompleteRequest,
    BookingCreate,
    BookingDisputeRequest,
    BookingListResponse,
    BookingResponse,
    BookingStatusUpdate,
)
from skillswap.services.booking_service import BookingService

router = APIRouter()

PrincipalDep = Annotated[Principal, Depends(get_current_principal)]
DbDep = Annotated[AsyncSession, Depends(get_db)]
ServiceDep = Annotated[BookingService, Depends(get_booking_service)]


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    request: BookingCreate,
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
) -> BookingResponse:
    """Request a booking on an offer."""
    booking = await service.create_booking(db, principal, request.offer_id, request.message)
    return BookingResponse.model_validate(booking)


@router.get("/", response_model=BookingListResponse)
async def list_bookings(
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
    role: BookingRole = Query(default=BookingRole.BOOKER),
    status_filter: BookingStatus | None = Query(default=None, alias="status"),
) -> BookingListResponse:
    """List bookings the user made (role=booker) or received (role=owner)."""
    bookings = await service.list_bookings(db, principal, role, status_filter)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings),
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: UUID,
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
) -> BookingResponse:
    """Get booking details."""
    booking = await service.get_booking(db, principal, booking_id)
    return BookingResponse.model_validate(booking)


@router.put("/{booking_id}/status", response_model=BookingResponse)
async def update_booking_status(
    booking_id: UUID,
    request: BookingStatusUpdate,
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
) -> BookingResponse:
    """Accept or reject a pending booking (offer owner only)."""
    booking = await service.set_status(db, principal, booking_id, request.status)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
) -> BookingResponse:
    """Cancel a pending or accepted booking (booker only)."""
    booking = await service.cancel(db, principal, booking_id)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/complete", response_model=BookingResponse)
async def mark_complete(
    booking_id: UUID,
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
    request: BookingCompleteRequest | None = None,
) -> BookingResponse:
    """Confirm that the engagement took place."""
    notes = request.notes if request else None
    booking = await service.mark_complete(db, principal, booking_id, notes)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/withdraw-completion", response_model=BookingResponse)
async def withdraw_completion(
    booking_id: UUID,
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
) -> BookingResponse:
    """Withdraw a completion confirmation."""
    booking = await service.withdraw_completion(db, principal, booking_id)
    return BookingResponse.model_validate(booking)


@router.post("/{booking_id}/dispute", response_model=BookingResponse)
async def raise_dispute(
    booking_id: UUID,
    request: BookingDisputeRequest,
    principal: PrincipalDep,
    db: DbDep,
    service: ServiceDep,
) -> BookingResponse:
    """Raise a dispute on an accepted or in-progress booking."""
    booking = await service.raise_dispute(db, principal, booking_id, request.reason)
    return BookingResponse.model_validate(booking)
