import logging
from datetime import datetime

from app.application.dtos.booking_dto import CustomerInfo
from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.id_generator import IdGenerator
from app.application.interfaces.listing_repo import ListingRepo
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.retry import VersionConflict, retry_on_conflict
from app.application.use_cases.check_availability import CheckAvailabilityUseCase
from app.domain.entities.booking import Booking, BookingPaymentStatus, BookingStatus
from app.domain.errors import ConflictError, InactiveResourceError, NotFoundError
from app.domain.value_objects.time_range import TimeRange


class CreateBookingUseCase:
    def __init__(
        self,
        listing_repo: ListingRepo,
        booking_repo: BookingRepo,
        availability: CheckAvailabilityUseCase,
        transaction_manager: TransactionManager,
        id_generator: IdGenerator,
        clock: Clock,
        max_attempts: int = 3,
    ) -> None:
        self._listing_repo = listing_repo
        self._booking_repo = booking_repo
        self._availability = availability
        self._transaction_manager = transaction_manager
        self._id_generator = id_generator
        self._clock = clock
        self._max_attempts = max_attempts
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        listing_id: str,
        start_time: datetime,
        end_time: datetime,
        requester_id: str,
        customer: CustomerInfo | None = None,
    ) -> Booking:
        customer = customer or CustomerInfo()

        async def attempt() -> Booking:
            listing = await self._listing_repo.get(listing_id)
            if listing is None:
                raise NotFoundError("Listing", listing_id)
            if not listing.is_active:
                raise InactiveResourceError(listing_id, listing.status.value)

            requested = TimeRange(start=start_time, end=end_time)
            if not await self._availability.execute(listing_id, requested.start, requested.end):
                raise ConflictError(listing_id)

            now = self._clock.now()
            booking = Booking(
                id=self._id_generator.new_id("bkg"),
                listing_id=listing.id,
                vendor_id=listing.vendor_id,
                user_id=requester_id,
                start_time=requested.start,
                end_time=requested.end,
                total_amount=listing.price,
                customer_name=customer.name,
                customer_email=customer.email,
                customer_phone=customer.phone,
                notes=customer.notes,
                status=BookingStatus.PENDING,
                payment_status=BookingPaymentStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            # The listing's version token serializes writers that claim time on it
            async with self._transaction_manager.start():
                claimed = await self._listing_repo.bump_booking_version(
                    listing.id, listing.booking_version
                )
                if not claimed:
                    raise VersionConflict(f"listing {listing.id} changed while booking")
                return await self._booking_repo.create(booking)

        try:
            booking = await retry_on_conflict(attempt, max_attempts=self._max_attempts)
        except VersionConflict as exc:
            raise ConflictError(listing_id) from exc

        self._logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "listing_id": booking.listing_id,
                "vendor_id": booking.vendor_id,
                "user_id": booking.user_id,
            },
        )
        return booking
