"""Read-only access to offers published by the offer service."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillswap.core.exceptions import NotFoundError
from skillswap.models.offer import Offer


class OfferLookup:
    """Resolves an offer id to the offer's owner and title."""

    async def get_offer(self, db: AsyncSession, offer_id: UUID) -> Offer:
        """Get offer by ID or raise NotFoundError."""
        result = await db.execute(select(Offer).where(Offer.id == offer_id))
        offer = result.scalar_one_or_none()
        if not offer:
            raise NotFoundError("Offer", str(offer_id))
        return offer


offer_lookup = OfferLookup()
