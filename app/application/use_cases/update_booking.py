import logging

from app.application.dtos.booking_dto import BookingPatch
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.listing_repo import ListingRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.retry import VersionConflict, retry_on_conflict
from app.application.use_cases.check_availability import CheckAvailabilityUseCase
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.errors import AuthorizationError, ConflictError, NotFoundError
from app.domain.value_objects.time_range import TimeRange


class UpdateBookingUseCase:
    def __init__(
        self,
        booking_repo: BookingRepo,
        listing_repo: ListingRepo,
        availability: CheckAvailabilityUseCase,
        transaction_manager: TransactionManager,
        clock: Clock,
        max_attempts: int = 3,
    ) -> None:
        self._booking_repo = booking_repo
        self._listing_repo = listing_repo
        self._availability = availability
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._max_attempts = max_attempts
        self._logger = logging.getLogger(__name__)

    async def execute(self, booking_id: str, patch: BookingPatch, requester_id: str) -> Booking:
        async def attempt() -> Booking:
            booking = await self._booking_repo.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking", booking_id)
            if not booking.is_vendor(requester_id):
                raise AuthorizationError(requester_id, "update booking")

            expected_version = booking.lock_version
            now = self._clock.now()
            listing = None

            if patch.changes_time:
                new_range = TimeRange(
                    start=patch.start_time or booking.start_time,
                    end=patch.end_time or booking.end_time,
                )
                listing = await self._listing_repo.get(booking.listing_id)
                available = await self._availability.execute(
                    booking.listing_id,
                    new_range.start,
                    new_range.end,
                    exclude_booking_id=booking.id,
                )
                if not available:
                    raise ConflictError(booking.listing_id)
                booking.start_time = new_range.start
                booking.end_time = new_range.end

            self._apply_fields(booking, patch)

            if patch.status is not None:
                if patch.status == BookingStatus.CANCELLED and booking.status != BookingStatus.CANCELLED:
                    booking.cancel(cancelled_by=requester_id, cancelled_at=now)
                else:
                    booking.transition_to(patch.status)

            booking.updated_at = now

            async with self._transaction_manager.start():
                if listing is not None:
                    claimed = await self._listing_repo.bump_booking_version(
                        listing.id, listing.booking_version
                    )
                    if not claimed:
                        raise VersionConflict(
                            f"listing {listing.id} changed while rescheduling", resource_id=listing.id
                        )
                return await self._booking_repo.save(booking, expected_lock_version=expected_version)

        try:
            updated = await retry_on_conflict(attempt, max_attempts=self._max_attempts)
        except VersionConflict as exc:
            raise ConflictError(exc.resource_id) from exc

        self._logger.info(
            "Booking updated",
            extra={"booking_id": booking_id, "fields": sorted(patch.provided())},
        )
        return updated

    def _apply_fields(self, booking: Booking, patch: BookingPatch) -> None:
        if patch.notes is not None:
            booking.notes = patch.notes
        if patch.customer_name is not None:
            booking.customer_name = patch.customer_name
        if patch.customer_email is not None:
            booking.customer_email = patch.customer_email
        if patch.customer_phone is not None:
            booking.customer_phone = patch.customer_phone
        if patch.total_amount is not None:
            booking.total_amount = patch.total_amount
