from datetime import datetime

from fastapi import APIRouter, Depends, Query, status

from app.api.auth import get_current_user
from app.api.dependencies import get_use_cases
from app.api.schemas.bookings import (
    AvailabilityResponse,
    BookingResponse,
    CancelBookingRequest,
    CreateBookingRequest,
    UpdateBookingRequest,
)
from app.application.interfaces.identity import Identity
from app.domain.value_objects.time_range import TimeRange

router = APIRouter()


@router.get("/bookings/availability", response_model=AvailabilityResponse)
async def check_availability(
    listing_id: str = Query(...),
    start_time: datetime = Query(...),
    end_time: datetime = Query(...),
    exclude_booking_id: str | None = Query(default=None),
    use_cases=Depends(get_use_cases),
) -> AvailabilityResponse:
    window = TimeRange(start=start_time, end=end_time)
    available = await use_cases["check_availability"].execute(
        listing_id=listing_id,
        start_time=window.start,
        end_time=window.end,
        exclude_booking_id=exclude_booking_id,
    )
    return AvailabilityResponse(
        listing_id=listing_id,
        start_time=window.start,
        end_time=window.end,
        available=available,
    )


@router.post(
    "/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_booking(
    payload: CreateBookingRequest,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["create_booking"].execute(
        listing_id=payload.listing_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        requester_id=user.uid,
        customer=payload.customer_info(default_name=user.name, default_email=user.email),
    )


@router.get("/bookings/vendor", response_model=list[BookingResponse])
async def list_vendor_bookings(
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["list_vendor_bookings"].execute(vendor_id=user.uid)


@router.get("/bookings/customer", response_model=list[BookingResponse])
async def list_customer_bookings(
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["list_customer_bookings"].execute(user_id=user.uid)


@router.get("/bookings/upcoming", response_model=list[BookingResponse])
async def list_upcoming_bookings(
    limit: int = Query(default=10, ge=1, le=100),
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["list_upcoming_bookings"].execute(vendor_id=user.uid, limit=limit)


@router.get("/bookings/range", response_model=list[BookingResponse])
async def list_bookings_in_range(
    start: datetime = Query(...),
    end: datetime = Query(...),
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["list_bookings_in_range"].execute(
        vendor_id=user.uid, range_start=start, range_end=end
    )


@router.get("/bookings/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["get_booking"].execute(booking_id=booking_id, requester_id=user.uid)


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: str,
    payload: UpdateBookingRequest,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["update_booking"].execute(
        booking_id=booking_id,
        patch=payload.to_patch(),
        requester_id=user.uid,
    )


@router.post("/bookings/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    payload: CancelBookingRequest | None = None,
    user: Identity = Depends(get_current_user),
    use_cases=Depends(get_use_cases),
):
    return await use_cases["cancel_booking"].execute(
        booking_id=booking_id,
        requester_id=user.uid,
        reason=payload.reason if payload else None,
    )
