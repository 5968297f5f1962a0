from datetime import datetime
from typing import Sequence

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.domain.entities.booking import Booking
from app.domain.value_objects.time_range import TimeRange


class ListVendorBookingsUseCase:
    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo

    async def execute(self, vendor_id: str) -> Sequence[Booking]:
        return await self._booking_repo.list_by_vendor(vendor_id)


class ListCustomerBookingsUseCase:
    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo

    async def execute(self, user_id: str) -> Sequence[Booking]:
        return await self._booking_repo.list_by_user(user_id)


class ListUpcomingBookingsUseCase:
    """Vendor bookings that have not started yet, soonest first."""

    def __init__(self, booking_repo: BookingRepo, clock: Clock) -> None:
        self._booking_repo = booking_repo
        self._clock = clock

    async def execute(self, vendor_id: str, limit: int = 10) -> Sequence[Booking]:
        return await self._booking_repo.list_upcoming_for_vendor(
            vendor_id, now=self._clock.now(), limit=limit
        )


class ListBookingsInRangeUseCase:
    """Vendor bookings fully contained in [range_start, range_end]."""

    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo

    async def execute(
        self,
        vendor_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> Sequence[Booking]:
        window = TimeRange(start=range_start, end=range_end)
        return await self._booking_repo.list_in_range_for_vendor(
            vendor_id, window.start, window.end
        )
