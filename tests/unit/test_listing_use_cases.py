from decimal import Decimal

import pytest

from app.application.dtos.listing_dto import ListingInput, ListingPatch
from app.domain.entities.listing import ListingStatus
from app.domain.errors import (
    AuthorizationError,
    HasActiveBookingsError,
    NotFoundError,
    ValidationError,
)
from tests.support import CUSTOMER_ID, NOW, VENDOR_ID, slot


class TestListingCrud:
    async def test_create_defaults_to_pending(self, use_cases):
        listing = await use_cases["create_listing"].execute(
            data=ListingInput(
                title="Surf lesson",
                price=Decimal("45.50"),
                category="sports",
                images=["https://cdn.example.com/1.jpg"],
            ),
            vendor_id=VENDOR_ID,
        )
        assert listing.id == "lst_0001"
        assert listing.status == ListingStatus.PENDING
        assert listing.vendor_id == VENDOR_ID
        assert listing.images == ["https://cdn.example.com/1.jpg"]
        assert listing.created_at == NOW

        fetched = await use_cases["get_listing"].execute(listing.id)
        assert fetched.title == "Surf lesson"

    async def test_negative_price_is_rejected(self, use_cases):
        with pytest.raises(ValidationError):
            await use_cases["create_listing"].execute(
                data=ListingInput(title="Free money", price=Decimal("-1")), vendor_id=VENDOR_ID
            )

    async def test_owner_updates_only_provided_fields(self, use_cases, active_listing):
        updated = await use_cases["update_listing"].execute(
            listing_id=active_listing.id,
            patch=ListingPatch(price=Decimal("120.00")),
            requester_id=VENDOR_ID,
        )
        assert updated.price == Decimal("120.00")
        assert updated.title == active_listing.title
        assert updated.status == ListingStatus.ACTIVE

    async def test_non_owner_cannot_update(self, use_cases, active_listing):
        with pytest.raises(AuthorizationError):
            await use_cases["update_listing"].execute(
                listing_id=active_listing.id,
                patch=ListingPatch(title="Mine now"),
                requester_id="vendor_2",
            )

    async def test_list_by_vendor(self, use_cases, active_listing):
        await use_cases["create_listing"].execute(
            data=ListingInput(title="Other", price=Decimal("1")), vendor_id="vendor_2"
        )
        mine = await use_cases["list_vendor_listings"].execute(VENDOR_ID)
        assert [lst.id for lst in mine] == [active_listing.id]

    async def test_get_unknown_listing(self, use_cases):
        with pytest.raises(NotFoundError):
            await use_cases["get_listing"].execute("lst_missing")


class TestListingDeletion:
    async def test_delete_listing_without_bookings(self, use_cases, active_listing):
        await use_cases["delete_listing"].execute(listing_id=active_listing.id, requester_id=VENDOR_ID)
        with pytest.raises(NotFoundError):
            await use_cases["get_listing"].execute(active_listing.id)

    async def test_non_owner_cannot_delete(self, use_cases, active_listing):
        with pytest.raises(AuthorizationError):
            await use_cases["delete_listing"].execute(listing_id=active_listing.id, requester_id=CUSTOMER_ID)

    async def test_delete_blocked_by_active_booking(self, use_cases, active_listing):
        start, end = slot(24)
        await use_cases["create_booking"].execute(
            listing_id=active_listing.id, start_time=start, end_time=end, requester_id=CUSTOMER_ID
        )
        with pytest.raises(HasActiveBookingsError):
            await use_cases["delete_listing"].execute(listing_id=active_listing.id, requester_id=VENDOR_ID)

    async def test_cancelled_bookings_do_not_block_deletion(self, use_cases, active_listing):
        start, end = slot(24)
        booking = await use_cases["create_booking"].execute(
            listing_id=active_listing.id, start_time=start, end_time=end, requester_id=CUSTOMER_ID
        )
        await use_cases["cancel_booking"].execute(booking_id=booking.id, requester_id=CUSTOMER_ID)

        await use_cases["delete_listing"].execute(listing_id=active_listing.id, requester_id=VENDOR_ID)
        assert await use_cases["list_vendor_listings"].execute(VENDOR_ID) == []
