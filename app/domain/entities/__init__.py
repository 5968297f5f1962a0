"""Entidades del dominio de reservas."""

from app.domain.entities.booking import (
    ACTIVE_STATUSES,
    Booking,
    BookingPaymentStatus,
    BookingStatus,
)
from app.domain.entities.listing import Listing, ListingStatus
from app.domain.entities.transaction import Transaction, TransactionStatus

__all__ = [
    # Booking
    "ACTIVE_STATUSES",
    "Booking",
    "BookingStatus",
    "BookingPaymentStatus",
    # Listing
    "Listing",
    "ListingStatus",
    # Transaction
    "Transaction",
    "TransactionStatus",
]
