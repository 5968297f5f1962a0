from app.application.interfaces.booking_repo import BookingRepo
from app.domain.errors import HasActiveBookingsError


class ListingDeletionGuard:
    """Blocks deleting a listing while any of its bookings is not cancelled."""

    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo

    async def execute(self, listing_id: str) -> None:
        if await self._booking_repo.exists_non_cancelled_for_listing(listing_id):
            raise HasActiveBookingsError(listing_id)
