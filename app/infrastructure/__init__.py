"""
Capa de Infraestructura - Sistema de Reservas.

Esta capa contiene las implementaciones concretas de los puertos (interfaces).
Incluye adaptadores para bases de datos, el procesador de pagos y la identidad.

Estructura:
- db/: Tablas, repositorios SQL y transaction manager
- gateways/: Adaptador real de Stripe
- in_memory/: Implementaciones in-memory para desarrollo y testing
- circuit_breaker.py: Circuit breaker para llamadas a Stripe
"""

# Database
from app.infrastructure.db.repositories.booking_repo_sql import BookingRepoSQL
from app.infrastructure.db.repositories.listing_repo_sql import ListingRepoSQL
from app.infrastructure.db.repositories.transaction_repo_sql import TransactionRepoSQL
from app.infrastructure.db.transaction_manager import SQLAlchemyTransactionManager

# Gateways
from app.infrastructure.gateways.stripe_gateway_real import StripeGatewayReal

# In-Memory
from app.infrastructure.in_memory import (
    HeaderIdentityVerifier,
    InMemoryBookingRepo,
    InMemoryListingRepo,
    InMemoryTransactionRepo,
    NoopTransactionManager,
    StubStripeGateway,
)

__all__ = [
    # Database - Repositories SQL
    "ListingRepoSQL",
    "BookingRepoSQL",
    "TransactionRepoSQL",
    "SQLAlchemyTransactionManager",
    # Gateways
    "StripeGatewayReal",
    # In-Memory Implementations
    "InMemoryListingRepo",
    "InMemoryBookingRepo",
    "InMemoryTransactionRepo",
    "StubStripeGateway",
    "HeaderIdentityVerifier",
    "NoopTransactionManager",
]
