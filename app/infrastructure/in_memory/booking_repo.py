from copy import deepcopy
from datetime import datetime
from typing import Sequence

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.errors import NotFoundError, OptimisticLockError


class InMemoryBookingRepo(BookingRepo):
    """Almacena copias: los llamadores nunca comparten instancias con el repo."""

    def __init__(self) -> None:
        self.bookings: dict[str, Booking] = {}

    async def get(self, booking_id: str) -> Booking | None:
        booking = self.bookings.get(booking_id)
        return deepcopy(booking) if booking else None

    async def create(self, booking: Booking) -> Booking:
        if booking.id in self.bookings:
            raise ValueError("Booking id already exists")
        self.bookings[booking.id] = deepcopy(booking)
        return deepcopy(booking)

    async def save(self, booking: Booking, expected_lock_version: int) -> Booking:
        stored = self.bookings.get(booking.id)
        if stored is None:
            raise NotFoundError("Booking", booking.id)
        if stored.lock_version != expected_lock_version:
            raise OptimisticLockError(
                "booking", booking.id, expected_lock_version, stored.lock_version
            )
        updated = deepcopy(booking)
        updated.lock_version = stored.lock_version + 1
        self.bookings[booking.id] = updated
        return deepcopy(updated)

    async def list_active_for_listing(
        self,
        listing_id: str,
        exclude_booking_id: str | None = None,
    ) -> Sequence[Booking]:
        return [
            deepcopy(b)
            for b in self.bookings.values()
            if b.listing_id == listing_id and b.is_active and b.id != exclude_booking_id
        ]

    async def exists_non_cancelled_for_listing(self, listing_id: str) -> bool:
        return any(
            b.listing_id == listing_id and b.status != BookingStatus.CANCELLED
            for b in self.bookings.values()
        )

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Booking]:
        return self._sorted(b for b in self.bookings.values() if b.vendor_id == vendor_id)

    async def list_by_user(self, user_id: str) -> Sequence[Booking]:
        return self._sorted(b for b in self.bookings.values() if b.user_id == user_id)

    async def list_upcoming_for_vendor(
        self,
        vendor_id: str,
        now: datetime,
        limit: int,
    ) -> Sequence[Booking]:
        upcoming = self._sorted(
            b
            for b in self.bookings.values()
            if b.vendor_id == vendor_id
            and b.start_time >= now
            and b.status != BookingStatus.CANCELLED
        )
        return upcoming[:limit]

    async def list_in_range_for_vendor(
        self,
        vendor_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> Sequence[Booking]:
        return self._sorted(
            b
            for b in self.bookings.values()
            if b.vendor_id == vendor_id
            and b.start_time >= range_start
            and b.end_time <= range_end
        )

    def _sorted(self, bookings) -> list[Booking]:
        return [deepcopy(b) for b in sorted(bookings, key=lambda b: b.start_time)]
