"""
Integration tests de los repositorios SQL sobre SQLite in-memory.

Verifica que:
- Los datetimes vuelven timezone-aware en UTC
- save() de reservas aplica compare-and-swap sobre lock_version
- bump_booking_version solo gana una vez por versión
- El libro contable es único por (external_payment_id, status)
- El transaction manager hace commit o rollback de la unidad de trabajo
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.domain.entities.booking import Booking, BookingStatus
from app.domain.entities.listing import Listing, ListingStatus
from app.domain.entities.transaction import Transaction, TransactionStatus
from app.domain.errors import NotFoundError, OptimisticLockError
from app.domain.value_objects.money import Money
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.listing_repo_sql import ListingRepoSQL
from app.infrastructure.db.repositories.transaction_repo_sql import TransactionRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

pytestmark = pytest.mark.integration

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _listing(listing_id: str = "lst_1") -> Listing:
    return Listing(
        id=listing_id,
        vendor_id="vendor_1",
        title="Boat trip",
        price=Decimal("80.00"),
        status=ListingStatus.ACTIVE,
        images=["https://cdn.example.com/a.jpg"],
        created_at=NOW,
        updated_at=NOW,
    )


def _booking(booking_id: str = "bkg_1", hours: int = 24, user_id: str = "customer_1") -> Booking:
    start = NOW + timedelta(hours=hours)
    return Booking(
        id=booking_id,
        listing_id="lst_1",
        vendor_id="vendor_1",
        user_id=user_id,
        start_time=start,
        end_time=start + timedelta(hours=1),
        total_amount=Decimal("80.00"),
        created_at=NOW,
        updated_at=NOW,
    )


def _completed(tx_id: str, payment_id: str = "pi_1", created_at: datetime = NOW) -> Transaction:
    return Transaction.completed(
        transaction_id=tx_id,
        booking_id="bkg_1",
        vendor_id="vendor_1",
        breakdown=Money(Decimal("80.00")).split_fee(Decimal("0.05")),
        external_payment_id=payment_id,
        created_at=created_at,
    )


class TestListingRepoSQL:
    async def test_roundtrip_and_listing_by_vendor(self, db_session):
        repo = ListingRepoSQL(db_session)
        await repo.create(_listing())
        await db_session.commit()

        stored = await repo.get("lst_1")
        assert stored.status == ListingStatus.ACTIVE
        assert stored.price == Decimal("80.00")
        assert stored.images == ["https://cdn.example.com/a.jpg"]
        assert stored.created_at == NOW
        assert stored.created_at.tzinfo is not None
        assert [lst.id for lst in await repo.list_by_vendor("vendor_1")] == ["lst_1"]

    async def test_booking_version_is_claimed_once(self, db_session):
        repo = ListingRepoSQL(db_session)
        await repo.create(_listing())

        assert await repo.bump_booking_version("lst_1", 0)
        assert not await repo.bump_booking_version("lst_1", 0)
        assert (await repo.get("lst_1")).booking_version == 1

    async def test_save_does_not_touch_booking_version(self, db_session):
        repo = ListingRepoSQL(db_session)
        await repo.create(_listing())
        await repo.bump_booking_version("lst_1", 0)

        stale = _listing()
        stale.title = "Sunset boat trip"
        await repo.save(stale)

        stored = await repo.get("lst_1")
        assert stored.title == "Sunset boat trip"
        assert stored.booking_version == 1

    async def test_delete(self, db_session):
        repo = ListingRepoSQL(db_session)
        await repo.create(_listing())
        await repo.delete("lst_1")
        assert await repo.get("lst_1") is None
        with pytest.raises(NotFoundError):
            await repo.delete("lst_1")


class TestBookingRepoSQL:
    async def test_save_with_expected_version(self, db_session):
        repo = BookingRepoSQL(db_session)
        await repo.create(_booking())

        booking = await repo.get("bkg_1")
        booking.transition_to(BookingStatus.CONFIRMED)
        saved = await repo.save(booking, expected_lock_version=0)

        assert saved.lock_version == 1
        stored = await repo.get("bkg_1")
        assert stored.status == BookingStatus.CONFIRMED
        assert stored.lock_version == 1
        assert stored.start_time == NOW + timedelta(hours=24)

    async def test_stale_write_is_rejected(self, db_session):
        repo = BookingRepoSQL(db_session)
        await repo.create(_booking())
        first = await repo.get("bkg_1")
        second = await repo.get("bkg_1")

        first.notes = "first writer"
        await repo.save(first, expected_lock_version=first.lock_version)

        second.notes = "second writer"
        with pytest.raises(OptimisticLockError) as exc_info:
            await repo.save(second, expected_lock_version=second.lock_version)
        assert exc_info.value.actual_version == 1
        assert (await repo.get("bkg_1")).notes == "first writer"

    async def test_save_unknown_booking(self, db_session):
        repo = BookingRepoSQL(db_session)
        with pytest.raises(NotFoundError):
            await repo.save(_booking("bkg_missing"), expected_lock_version=0)

    async def test_active_and_non_cancelled_queries(self, db_session):
        repo = BookingRepoSQL(db_session)
        await repo.create(_booking("bkg_1", hours=24))
        cancelled = replace(_booking("bkg_2", hours=30), status=BookingStatus.CANCELLED)
        await repo.create(cancelled)

        active = await repo.list_active_for_listing("lst_1")
        assert [b.id for b in active] == ["bkg_1"]
        assert await repo.list_active_for_listing("lst_1", exclude_booking_id="bkg_1") == []
        assert await repo.exists_non_cancelled_for_listing("lst_1")
        assert not await repo.exists_non_cancelled_for_listing("lst_other")

    async def test_upcoming_and_range_queries(self, db_session):
        repo = BookingRepoSQL(db_session)
        await repo.create(_booking("bkg_past", hours=-5))
        await repo.create(_booking("bkg_soon", hours=2, user_id="customer_2"))
        await repo.create(_booking("bkg_later", hours=48))

        upcoming = await repo.list_upcoming_for_vendor("vendor_1", now=NOW, limit=1)
        assert [b.id for b in upcoming] == ["bkg_soon"]

        in_range = await repo.list_in_range_for_vendor(
            "vendor_1", NOW - timedelta(hours=6), NOW + timedelta(hours=4)
        )
        assert [b.id for b in in_range] == ["bkg_past", "bkg_soon"]
        assert [b.id for b in await repo.list_by_user("customer_2")] == ["bkg_soon"]


class TestTransactionRepoSQL:
    async def test_add_once_is_idempotent(self, db_session):
        repo = TransactionRepoSQL(db_session)

        first, created = await repo.add_once(_completed("txn_1"))
        again, created_again = await repo.add_once(_completed("txn_2"))

        assert created
        assert not created_again
        assert again.id == first.id == "txn_1"
        assert len(await repo.list_by_booking("bkg_1")) == 1

    async def test_refund_row_coexists_with_completed_row(self, db_session):
        repo = TransactionRepoSQL(db_session)
        await repo.add_once(_completed("txn_1"))
        refund = Transaction.refund(
            transaction_id="txn_2",
            booking_id="bkg_1",
            vendor_id="vendor_1",
            breakdown=Money(Decimal("30.00")).split_fee(Decimal("0.05")),
            external_payment_id="pi_1",
            refund_id="re_1",
            created_at=NOW + timedelta(minutes=1),
        )
        _, created = await repo.add_once(refund)

        assert created
        stored = await repo.find_by_external_payment("pi_1", TransactionStatus.REFUNDED)
        assert stored.amount == Decimal("-30.00")
        assert stored.fee + stored.net == stored.amount
        rows = await repo.list_by_vendor("vendor_1")
        assert [r.id for r in rows] == ["txn_2", "txn_1"]


class TestSQLAlchemyTransactionManager:
    async def test_commit_after_reads(self, test_engine, db_session):
        repo = ListingRepoSQL(db_session)
        tm = SQLAlchemyTransactionManager(db_session)

        assert await repo.get("lst_1") is None
        async with tm.start():
            await repo.create(_listing())

        assert not db_session.in_transaction()
        async with async_sessionmaker(test_engine)() as other:
            assert await ListingRepoSQL(other).get("lst_1") is not None

    async def test_rollback_on_error(self, db_session):
        repo = ListingRepoSQL(db_session)
        tm = SQLAlchemyTransactionManager(db_session)

        with pytest.raises(RuntimeError):
            async with tm.start():
                await repo.create(_listing())
                raise RuntimeError("boom")

        assert await repo.get("lst_1") is None
