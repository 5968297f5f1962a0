"""
Capa de Aplicación - Plataforma de reservas de proveedores.

Esta capa contiene los casos de uso, DTOs e interfaces (puertos).
Orquesta la lógica de negocio y define los contratos con la infraestructura.

Estructura:
- use_cases/: Casos de uso del sistema
- dtos/: Data Transfer Objects
- interfaces/: Puertos (contratos para adaptadores)
- retry.py: Reintentos ante conflictos de concurrencia optimista
"""

from app.application.dtos import (
    BookingPatch,
    CustomerInfo,
    ListingInput,
    ListingPatch,
    PaymentRequestDTO,
    RefundDTO,
    VendorMetricsDTO,
    WebhookAction,
    WebhookOutcome,
)
from app.application.interfaces import (
    BookingRepo,
    Clock,
    FakeClock,
    FakeIdGenerator,
    IdentityVerifier,
    IdGenerator,
    ListingRepo,
    RealIdGenerator,
    StripeGateway,
    SystemClock,
    TransactionManager,
    TransactionRepo,
)

__all__ = [
    # DTOs
    "BookingPatch",
    "CustomerInfo",
    "ListingInput",
    "ListingPatch",
    "PaymentRequestDTO",
    "RefundDTO",
    "VendorMetricsDTO",
    "WebhookAction",
    "WebhookOutcome",
    # Interfaces - Repositories
    "BookingRepo",
    "ListingRepo",
    "TransactionRepo",
    # Interfaces - Gateways
    "StripeGateway",
    "IdentityVerifier",
    # Interfaces - Infrastructure
    "TransactionManager",
    # Interfaces - Utilities
    "Clock",
    "SystemClock",
    "FakeClock",
    "IdGenerator",
    "RealIdGenerator",
    "FakeIdGenerator",
]
