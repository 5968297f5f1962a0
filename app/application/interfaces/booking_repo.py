from datetime import datetime
from typing import Sequence

from app.domain.entities.booking import Booking


class BookingRepo:
    async def get(self, booking_id: str) -> Booking | None:
        raise NotImplementedError

    async def create(self, booking: Booking) -> Booking:
        raise NotImplementedError

    async def save(self, booking: Booking, expected_lock_version: int) -> Booking:
        """
        Escritura condicional de la reserva completa.

        Lanza NotFoundError si no existe y OptimisticLockError si lock_version
        no coincide. Retorna la reserva con lock_version incrementado.
        """
        raise NotImplementedError

    async def list_active_for_listing(
        self,
        listing_id: str,
        exclude_booking_id: str | None = None,
    ) -> Sequence[Booking]:
        """Reservas pending/confirmed del listing."""
        raise NotImplementedError

    async def exists_non_cancelled_for_listing(self, listing_id: str) -> bool:
        raise NotImplementedError

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Booking]:
        raise NotImplementedError

    async def list_by_user(self, user_id: str) -> Sequence[Booking]:
        raise NotImplementedError

    async def list_upcoming_for_vendor(
        self,
        vendor_id: str,
        now: datetime,
        limit: int,
    ) -> Sequence[Booking]:
        """start_time >= now, status != cancelled, ordenadas por start_time."""
        raise NotImplementedError

    async def list_in_range_for_vendor(
        self,
        vendor_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> Sequence[Booking]:
        raise NotImplementedError
