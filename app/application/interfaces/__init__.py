"""Interfaces (Puertos) de la capa de aplicación."""

from app.application.interfaces.booking_repo import BookingRepo
from app.application.interfaces.clock import Clock, FakeClock, SystemClock
from app.application.interfaces.id_generator import (
    FakeIdGenerator,
    IdGenerator,
    RealIdGenerator,
)
from app.application.interfaces.identity import Identity, IdentityVerifier
from app.application.interfaces.listing_repo import ListingRepo
from app.application.interfaces.stripe_gateway import (
    PaymentIntentResult,
    RefundResult,
    StripeGateway,
)
from app.application.interfaces.transaction_manager import TransactionManager
from app.application.interfaces.transaction_repo import TransactionRepo

__all__ = [
    # Repositories
    "BookingRepo",
    "ListingRepo",
    "TransactionRepo",
    # Gateways
    "StripeGateway",
    "PaymentIntentResult",
    "RefundResult",
    "IdentityVerifier",
    "Identity",
    # Infrastructure
    "TransactionManager",
    # Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
