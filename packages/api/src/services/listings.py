# This project was developed with assistance from AI tools.
"""Read-only listing lookup.

Only the terms the lifecycle needs (jurisdiction, rent, fee, owner) are
exposed, as an immutable value that is safe to keep in the read cache.
"""

from dataclasses import dataclass
from decimal import Decimal

from db import Listing
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.config import settings
from .cache import ReadCache, listing_cache


@dataclass(frozen=True)
class ListingTerms:
    listing_id: int
    owner_id: str
    agent_id: str | None
    state_code: str | None
    monthly_rent: Decimal | None
    application_fee: Decimal


async def _load_terms(session: AsyncSession, listing_id: int) -> ListingTerms | None:
    result = await session.execute(select(Listing).where(Listing.id == listing_id))
    listing = result.scalar_one_or_none()
    if listing is None:
        return None
    return ListingTerms(
        listing_id=listing.id,
        owner_id=listing.owner_id,
        agent_id=listing.agent_id,
        state_code=listing.state_code,
        monthly_rent=listing.monthly_rent,
        application_fee=(
            listing.application_fee
            if listing.application_fee is not None
            else settings.DEFAULT_APPLICATION_FEE
        ),
    )


async def get_listing_terms(
    session: AsyncSession,
    listing_id: int,
    *,
    cache: ReadCache | None = None,
) -> ListingTerms | None:
    """Return listing terms, via the read cache. None if the listing is unknown."""
    cache = cache if cache is not None else listing_cache
    return await cache.get_or_load(("listing", listing_id), lambda: _load_terms(session, listing_id))
