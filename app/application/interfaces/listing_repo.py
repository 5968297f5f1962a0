from typing import Sequence

from app.domain.entities.listing import Listing


class ListingRepo:
    async def get(self, listing_id: str) -> Listing | None:
        raise NotImplementedError

    async def create(self, listing: Listing) -> Listing:
        raise NotImplementedError

    async def save(self, listing: Listing) -> Listing:
        """Persiste los campos editables; lanza NotFoundError si no existe."""
        raise NotImplementedError

    async def delete(self, listing_id: str) -> None:
        raise NotImplementedError

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Listing]:
        raise NotImplementedError

    async def bump_booking_version(self, listing_id: str, expected_version: int) -> bool:
        """
        Compare-and-swap del token de reservas del listing.

        Retorna False si otro escritor lo incrementó primero.
        """
        raise NotImplementedError
