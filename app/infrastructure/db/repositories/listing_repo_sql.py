from typing import Sequence

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.listing_repo import ListingRepo
from app.domain.entities.listing import Listing, ListingStatus
from app.domain.errors import NotFoundError
from app.infrastructure.db.tables import listings


class ListingRepoSQL(ListingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, listing_id: str) -> Listing | None:
        stmt = select(listings).where(listings.c.id == listing_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_listing(row) if row else None

    async def create(self, listing: Listing) -> Listing:
        stmt = insert(listings).values(
            id=listing.id,
            vendor_id=listing.vendor_id,
            booking_version=listing.booking_version,
            **self._editable_values(listing),
            created_at=listing.created_at,
        )
        await self._session.execute(stmt)
        return listing

    async def save(self, listing: Listing) -> Listing:
        stmt = (
            update(listings)
            .where(listings.c.id == listing.id)
            .values(**self._editable_values(listing))
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Listing", listing.id)
        return listing

    async def delete(self, listing_id: str) -> None:
        result = await self._session.execute(delete(listings).where(listings.c.id == listing_id))
        if result.rowcount == 0:
            raise NotFoundError("Listing", listing_id)

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Listing]:
        stmt = (
            select(listings)
            .where(listings.c.vendor_id == vendor_id)
            .order_by(listings.c.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._map_listing(row) for row in result.mappings().all()]

    async def bump_booking_version(self, listing_id: str, expected_version: int) -> bool:
        stmt = (
            update(listings)
            .where(
                listings.c.id == listing_id,
                listings.c.booking_version == expected_version,
            )
            .values(booking_version=listings.c.booking_version + 1)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    def _editable_values(self, listing: Listing) -> dict:
        return {
            "title": listing.title,
            "description": listing.description,
            "price": listing.price,
            "category": listing.category,
            "status": listing.status.value,
            "images": list(listing.images),
            "documents": list(listing.documents),
            "updated_at": listing.updated_at,
        }

    def _map_listing(self, row) -> Listing:
        return Listing(
            id=row["id"],
            vendor_id=row["vendor_id"],
            title=row["title"],
            description=row.get("description") or "",
            price=row["price"],
            category=row.get("category"),
            status=ListingStatus(row["status"]),
            images=list(row.get("images") or []),
            documents=list(row.get("documents") or []),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            booking_version=row.get("booking_version") or 0,
        )
