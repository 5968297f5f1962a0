"""Implementaciones in-memory para desarrollo y testing."""

from app.infrastructure.in_memory.booking_repo import InMemoryBookingRepo
from app.infrastructure.in_memory.identity_verifier import HeaderIdentityVerifier
from app.infrastructure.in_memory.listing_repo import InMemoryListingRepo
from app.infrastructure.in_memory.stripe_gateway import StubStripeGateway
from app.infrastructure.in_memory.transaction_manager import NoopTransactionManager
from app.infrastructure.in_memory.transaction_repo import InMemoryTransactionRepo

__all__ = [
    # Repositories
    "InMemoryBookingRepo",
    "InMemoryListingRepo",
    "InMemoryTransactionRepo",
    # Gateways
    "StubStripeGateway",
    "HeaderIdentityVerifier",
    # Infrastructure
    "NoopTransactionManager",
]
