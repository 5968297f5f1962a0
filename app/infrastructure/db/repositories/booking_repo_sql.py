from dataclasses import replace
from datetime import datetime
from typing import Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import (
    ACTIVE_STATUSES,
    Booking,
    BookingPaymentStatus,
    BookingStatus,
)
from app.domain.errors import NotFoundError, OptimisticLockError
from app.infrastructure.db.tables import bookings


class BookingRepoSQL(BookingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, booking_id: str) -> Booking | None:
        stmt = select(bookings).where(bookings.c.id == booking_id).limit(1)
        result = await self._session.execute(stmt)
        row = result.mappings().first()
        return self._map_booking(row) if row else None

    async def create(self, booking: Booking) -> Booking:
        stmt = insert(bookings).values(
            id=booking.id,
            listing_id=booking.listing_id,
            vendor_id=booking.vendor_id,
            user_id=booking.user_id,
            created_at=booking.created_at,
            lock_version=booking.lock_version,
            **self._mutable_values(booking),
        )
        await self._session.execute(stmt)
        return booking

    async def save(self, booking: Booking, expected_lock_version: int) -> Booking:
        stmt = (
            update(bookings)
            .where(
                bookings.c.id == booking.id,
                bookings.c.lock_version == expected_lock_version,
            )
            .values(
                **self._mutable_values(booking),
                lock_version=bookings.c.lock_version + 1,
            )
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            current = await self._session.execute(
                select(bookings.c.lock_version).where(bookings.c.id == booking.id)
            )
            actual_version = current.scalar()
            if actual_version is None:
                raise NotFoundError("Booking", booking.id)
            raise OptimisticLockError("booking", booking.id, expected_lock_version, actual_version)
        return replace(booking, lock_version=expected_lock_version + 1)

    async def list_active_for_listing(
        self,
        listing_id: str,
        exclude_booking_id: str | None = None,
    ) -> Sequence[Booking]:
        conditions = [
            bookings.c.listing_id == listing_id,
            bookings.c.status.in_([s.value for s in ACTIVE_STATUSES]),
        ]
        if exclude_booking_id:
            conditions.append(bookings.c.id != exclude_booking_id)
        result = await self._session.execute(select(bookings).where(*conditions))
        return [self._map_booking(row) for row in result.mappings().all()]

    async def exists_non_cancelled_for_listing(self, listing_id: str) -> bool:
        stmt = (
            select(bookings.c.id)
            .where(
                bookings.c.listing_id == listing_id,
                bookings.c.status != BookingStatus.CANCELLED.value,
            )
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalar() is not None

    async def list_by_vendor(self, vendor_id: str) -> Sequence[Booking]:
        return await self._list(bookings.c.vendor_id == vendor_id)

    async def list_by_user(self, user_id: str) -> Sequence[Booking]:
        return await self._list(bookings.c.user_id == user_id)

    async def list_upcoming_for_vendor(
        self,
        vendor_id: str,
        now: datetime,
        limit: int,
    ) -> Sequence[Booking]:
        return await self._list(
            bookings.c.vendor_id == vendor_id,
            bookings.c.start_time >= now,
            bookings.c.status != BookingStatus.CANCELLED.value,
            limit=limit,
        )

    async def list_in_range_for_vendor(
        self,
        vendor_id: str,
        range_start: datetime,
        range_end: datetime,
    ) -> Sequence[Booking]:
        return await self._list(
            bookings.c.vendor_id == vendor_id,
            bookings.c.start_time >= range_start,
            bookings.c.end_time <= range_end,
        )

    async def _list(self, *conditions, limit: int | None = None) -> list[Booking]:
        stmt = select(bookings).where(*conditions).order_by(bookings.c.start_time)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._map_booking(row) for row in result.mappings().all()]

    def _mutable_values(self, booking: Booking) -> dict:
        return {
            "customer_name": booking.customer_name,
            "customer_email": booking.customer_email,
            "customer_phone": booking.customer_phone,
            "start_time": booking.start_time,
            "end_time": booking.end_time,
            "status": booking.status.value,
            "notes": booking.notes,
            "total_amount": booking.total_amount,
            "payment_status": booking.payment_status.value,
            "stripe_payment_intent_id": booking.stripe_payment_intent_id,
            "stripe_payment_id": booking.stripe_payment_id,
            "refund_id": booking.refund_id,
            "cancelled_by": booking.cancelled_by,
            "cancelled_at": booking.cancelled_at,
            "cancel_reason": booking.cancel_reason,
            "updated_at": booking.updated_at,
        }

    def _map_booking(self, row) -> Booking:
        return Booking(
            id=row["id"],
            listing_id=row["listing_id"],
            vendor_id=row["vendor_id"],
            user_id=row["user_id"],
            start_time=row["start_time"],
            end_time=row["end_time"],
            total_amount=row["total_amount"],
            customer_name=row.get("customer_name"),
            customer_email=row.get("customer_email"),
            customer_phone=row.get("customer_phone"),
            notes=row.get("notes"),
            status=BookingStatus(row["status"]),
            payment_status=BookingPaymentStatus(row["payment_status"]),
            stripe_payment_intent_id=row.get("stripe_payment_intent_id"),
            stripe_payment_id=row.get("stripe_payment_id"),
            refund_id=row.get("refund_id"),
            cancelled_by=row.get("cancelled_by"),
            cancelled_at=row.get("cancelled_at"),
            cancel_reason=row.get("cancel_reason"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
            lock_version=row.get("lock_version") or 0,
        )
