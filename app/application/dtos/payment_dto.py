"""DTOs para pagos."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from app.domain.entities.booking import BookingPaymentStatus


@dataclass
class PaymentRequestDTO:
    """Resultado de crear un Payment Intent para una reserva."""

    booking_id: str
    payment_intent_id: str
    client_secret: str | None
    amount: Decimal
    fee: Decimal
    currency: str
    status: str


@dataclass
class RefundDTO:
    """Resultado de un reembolso."""

    booking_id: str
    refund_id: str
    amount: Decimal
    status: str
    payment_status: BookingPaymentStatus


class WebhookAction(str, Enum):
    """Qué hizo el orquestador con un evento del procesador."""

    APPLIED = "applied"
    DUPLICATE = "duplicate"
    STALE = "stale"
    IGNORED = "ignored"
    BOOKING_MISSING = "booking_missing"
    FAILED = "failed"


@dataclass
class WebhookOutcome:
    event_id: str | None
    event_type: str | None
    action: WebhookAction
    booking_id: str | None = None
