"""Booking model."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skillswap.database import Base

if TYPE_CHECKING:
    from skillswap.models.offer import Offer
    from skillswap.models.user import User


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Booking(Base):
    """A booker's engagement on someone else's offer."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("offer_owner_id <> booked_by_id", name="ck_bookings_no_self_booking"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    offer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("offers.id"), nullable=False, index=True
    )
    offer_owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )  # copied from the offer at creation
    booked_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False, index=True
    )

    status: Mapped[str] = mapped_column(
        String(20), default="pending", index=True
    )  # pending, accepted, rejected, cancelled, in_progress, completed, disputed
    message: Mapped[str] = mapped_column(Text, default="")

    # Completion handshake
    completed_by_booker: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_by_owner: Mapped[bool] = mapped_column(Boolean, default=False)
    booker_confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    owner_confirmed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    session_notes: Mapped[str] = mapped_column(Text, default="")

    # Dispute
    dispute_reason: Mapped[str] = mapped_column(Text, default="")
    disputed_by_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, ForeignKey("users.id"))
    disputed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Compare-and-swap counter, bumped by SQLAlchemy on every UPDATE
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow
    )

    __mapper_args__ = {"version_id_col": version}

    # Relationships
    offer: Mapped["Offer"] = relationship("Offer")
    offer_owner: Mapped["User"] = relationship("User", foreign_keys=[offer_owner_id])
    booked_by: Mapped["User"] = relationship("User", foreign_keys=[booked_by_id])
