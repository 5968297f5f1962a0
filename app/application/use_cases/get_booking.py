from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import Booking
from app.domain.errors import AuthorizationError, NotFoundError


class GetBookingUseCase:
    def __init__(self, booking_repo: BookingRepo) -> None:
        self._booking_repo = booking_repo

    async def execute(self, booking_id: str, requester_id: str) -> Booking:
        booking = await self._booking_repo.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking", booking_id)
        if not booking.is_party(requester_id):
            raise AuthorizationError(requester_id, "view booking")
        return booking
