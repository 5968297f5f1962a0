import logging

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.retry import retry_on_conflict
from app.domain.entities.booking import Booking, BookingStatus
from app.domain.errors import (
    AlreadyCancelledError,
    AuthorizationError,
    NotFoundError,
    PastBookingError,
)


class CancelBookingUseCase:
    def __init__(
        self,
        booking_repo: BookingRepo,
        transaction_manager: TransactionManager,
        clock: Clock,
    ) -> None:
        self._booking_repo = booking_repo
        self._transaction_manager = transaction_manager
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    async def execute(
        self,
        booking_id: str,
        requester_id: str,
        reason: str | None = None,
    ) -> Booking:
        async def attempt() -> Booking:
            booking = await self._booking_repo.get(booking_id)
            if booking is None:
                raise NotFoundError("Booking", booking_id)
            if not booking.is_party(requester_id):
                raise AuthorizationError(requester_id, "cancel booking")
            if booking.status == BookingStatus.CANCELLED:
                raise AlreadyCancelledError(booking_id)

            now = self._clock.now()
            if booking.start_time < now:
                raise PastBookingError(booking_id)

            expected_version = booking.lock_version
            booking.cancel(cancelled_by=requester_id, cancelled_at=now, reason=reason)
            booking.updated_at = now
            async with self._transaction_manager.start():
                return await self._booking_repo.save(booking, expected_lock_version=expected_version)

        cancelled = await retry_on_conflict(attempt)
        self._logger.info(
            "Booking cancelled",
            extra={
                "booking_id": booking_id,
                "cancelled_by": requester_id,
                "cancel_reason": reason,
            },
        )
        return cancelled
