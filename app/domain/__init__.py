"""
Capa de Dominio - Plataforma de reservas de proveedores.

Esta capa contiene la lógica de negocio pura, sin dependencias de frameworks.
Incluye entidades, value objects y excepciones de dominio.

Estructura:
- entities/: Entidades del dominio (Listing, Booking, Transaction)
- value_objects/: Objetos de valor inmutables (Money, TimeRange)
- errors.py: Excepciones específicas del dominio
"""

from app.domain.entities import (
    Booking,
    BookingPaymentStatus,
    BookingStatus,
    Listing,
    ListingStatus,
    Transaction,
    TransactionStatus,
)
from app.domain.errors import (
    AlreadyCancelledError,
    AuthorizationError,
    ConflictError,
    DomainError,
    ExternalProcessorError,
    HasActiveBookingsError,
    InactiveResourceError,
    InvalidRangeError,
    InvalidSignatureError,
    InvalidStatusTransitionError,
    NoPaymentError,
    NotFoundError,
    NotPaidError,
    OptimisticLockError,
    PastBookingError,
    UnauthorizedError,
    ValidationError,
)
from app.domain.value_objects import FeeBreakdown, Money, TimeRange

__all__ = [
    # Entities
    "Booking",
    "BookingStatus",
    "BookingPaymentStatus",
    "Listing",
    "ListingStatus",
    "Transaction",
    "TransactionStatus",
    # Value Objects
    "FeeBreakdown",
    "Money",
    "TimeRange",
    # Errors
    "DomainError",
    "NotFoundError",
    "AuthorizationError",
    "UnauthorizedError",
    "ValidationError",
    "OptimisticLockError",
    "InvalidStatusTransitionError",
    "InvalidRangeError",
    "ConflictError",
    "InactiveResourceError",
    "AlreadyCancelledError",
    "PastBookingError",
    "HasActiveBookingsError",
    "InvalidSignatureError",
    "NoPaymentError",
    "NotPaidError",
    "ExternalProcessorError",
]
