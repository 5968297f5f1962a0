from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    """Stores naive UTC and returns timezone-aware UTC datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


metadata = MetaData()

listings = Table(
    "listings",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("vendor_id", String(128), nullable=False, index=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=False, default=""),
    Column("price", Numeric(12, 2), nullable=False),
    Column("category", String(100)),
    Column("status", String(32), nullable=False),
    Column("images", JSON, nullable=False, default=list),
    Column("documents", JSON, nullable=False, default=list),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    Column("booking_version", Integer, nullable=False, default=0),
)

bookings = Table(
    "bookings",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("listing_id", String(64), nullable=False),
    Column("vendor_id", String(128), nullable=False, index=True),
    Column("user_id", String(128), nullable=False, index=True),
    Column("customer_name", String(255)),
    Column("customer_email", String(255)),
    Column("customer_phone", String(50)),
    Column("start_time", UTCDateTime, nullable=False),
    Column("end_time", UTCDateTime, nullable=False),
    Column("status", String(32), nullable=False),
    Column("notes", Text),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("payment_status", String(32), nullable=False),
    Column("stripe_payment_intent_id", String(255)),
    Column("stripe_payment_id", String(255)),
    Column("refund_id", String(255)),
    Column("cancelled_by", String(128)),
    Column("cancelled_at", UTCDateTime),
    Column("cancel_reason", String(500)),
    Column("created_at", UTCDateTime),
    Column("updated_at", UTCDateTime),
    Column("lock_version", Integer, nullable=False, default=0),
    Index("ix_bookings_listing_status", "listing_id", "status"),
)

transactions = Table(
    "transactions",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("booking_id", String(64), nullable=False, index=True),
    Column("vendor_id", String(128), nullable=False, index=True),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("fee", Numeric(12, 2), nullable=False),
    Column("net", Numeric(12, 2), nullable=False),
    Column("external_payment_id", String(255), nullable=False),
    Column("status", String(32), nullable=False),
    Column("refund_id", String(255)),
    Column("created_at", UTCDateTime, nullable=False),
    UniqueConstraint("external_payment_id", "status", name="uq_transactions_payment_status"),
)
