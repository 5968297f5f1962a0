from copy import deepcopy
from typing import Sequence

from app.application.interfaces.listing_repo import ListingRepo
from app.domain.entities.listing import Listing
from app.domain.errors import NotFoundError


class InMemoryListingRepo(ListingRepo):
    def __init__(self) -> None:
        self.listings: dict[str, Listing] = {}

    async def get(self, listing_id: str) -> Listing | None:
        listing = self.listings.get(listing_id)
        return deepcopy(listing) if listing else None

    async def create(self, listing: Listing) -> Listing:
        if listing.id in self.listings:
            raise ValueError("Listing id already exists")
        self.listings[listing.id] = deepcopy(listing)
        return deepcopy(listing)

    async def save(self, listing: Listing) -> Listing:
        stored = self.listings.get(listing.id)
        if stored is None:
            raise NotFoundError("Listing", listing.id)
        updated = deepcopy(listing)
        # El token de reservas solo cambia por bump_booking_version
        updated.booking_version = stored.booking_version
        self.listings[listing.id] = updated
        return deepcopy(updated)

    async def delete(self, listing_id: str) -> None:
        if self.listings.pop(listing_id, None) is None:
            raise NotFoundError("Listing", listing_id)

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Listing]:
        return [deepcopy(lst) for lst in self.listings.values() if lst.vendor_id == vendor_id]

    async def bump_booking_version(self, listing_id: str, expected_version: int) -> bool:
        stored = self.listings.get(listing_id)
        if stored is None:
            raise NotFoundError("Listing", listing_id)
        if stored.booking_version != expected_version:
            return False
        stored.booking_version += 1
        return True
