"""Booking-related Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class BookingCreate(BaseModel):
    """Schema for requesting a booking."""

    offer_id: UUID
    message: str | None = Field(None, max_length=1000)


class BookingStatusUpdate(BaseModel):
    """Schema for the owner's answer to a booking request."""

    # Checked against the allowed targets by the state machine
    status: str = Field(..., max_length=20)


class BookingCompleteRequest(BaseModel):
    """Schema for confirming completion."""

    notes: str | None = Field(None, max_length=2000)


class BookingDisputeRequest(BaseModel):
    """Schema for raising a dispute."""

    reason: str = Field(..., max_length=2000)


class OfferSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    price: Decimal


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    offer_id: UUID
    offer_owner_id: UUID
    booked_by_id: UUID

    # Status
    status: str
    message: str

    # Completion
    completed_by_booker: bool
    completed_by_owner: bool
    booker_confirmed_at: datetime | None
    owner_confirmed_at: datetime | None
    completed_at: datetime | None
    session_notes: str

    # Dispute
    dispute_reason: str
    disputed_by_id: UUID | None
    disputed_at: datetime | None

    version: int
    created_at: datetime
    updated_at: datetime

    # Related records resolved for display
    offer: OfferSummary | None = None
    booked_by: UserSummary | None = None
    offer_owner: UserSummary | None = None


class BookingListResponse(BaseModel):
    """Schema for booking list."""

    bookings: list[BookingResponse]
    total: int
