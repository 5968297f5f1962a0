import logging
from datetime import datetime

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.value_objects.time_range import TimeRange


class CheckAvailabilityUseCase:
    """Decides whether a half-open interval is free on a listing."""

    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        listing_id: str,
        start_time: datetime,
        end_time: datetime,
        exclude_booking_id: str | None = None,
    ) -> bool:
        requested = TimeRange(start=start_time, end=end_time)
        active = await self._booking_repo.list_active_for_listing(
            listing_id, exclude_booking_id=exclude_booking_id
        )
        for booking in active:
            if booking.id == exclude_booking_id:
                continue
            if requested.overlaps_with(booking.time_range):
                self._logger.debug(
                    "Requested slot overlaps an active booking",
                    extra={
                        "listing_id": listing_id,
                        "conflicting_booking_id": booking.id,
                        "requested": str(requested),
                    },
                )
                return False
        return True
