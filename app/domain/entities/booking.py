"""Entidad Booking - Agregado raíz del dominio."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.errors import AlreadyCancelledError, InvalidStatusTransitionError
from app.domain.value_objects.time_range import TimeRange


class BookingStatus(str, Enum):
    """Estados del ciclo de vida de una reserva."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class BookingPaymentStatus(str, Enum):
    """Estados de pago de una reserva."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.COMPLETED: frozenset(),
}

# "failed" puede volver a "pending" (nuevo intento) o pasar a "paid" (reintento exitoso).
# "paid" nunca retrocede a "failed": un evento de fallo tardío se ignora.
PAYMENT_TRANSITIONS: dict[BookingPaymentStatus, frozenset[BookingPaymentStatus]] = {
    BookingPaymentStatus.PENDING: frozenset(
        {BookingPaymentStatus.PENDING, BookingPaymentStatus.PAID, BookingPaymentStatus.FAILED}
    ),
    BookingPaymentStatus.FAILED: frozenset(
        {BookingPaymentStatus.PENDING, BookingPaymentStatus.PAID, BookingPaymentStatus.FAILED}
    ),
    BookingPaymentStatus.PAID: frozenset(
        {BookingPaymentStatus.REFUNDED, BookingPaymentStatus.PARTIALLY_REFUNDED}
    ),
    BookingPaymentStatus.REFUNDED: frozenset(),
    BookingPaymentStatus.PARTIALLY_REFUNDED: frozenset(),
}

ACTIVE_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


@dataclass
class Booking:
    """
    Reserva de un intervalo de tiempo sobre un listing.

    El ciclo de vida (status) y el ciclo de pago (payment_status) son dos
    máquinas de estado independientes que se componen por el id de la reserva.
    """

    id: str
    listing_id: str
    vendor_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    total_amount: Decimal

    # Datos del cliente
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    notes: str | None = None

    # Estados
    status: BookingStatus = BookingStatus.PENDING
    payment_status: BookingPaymentStatus = BookingPaymentStatus.PENDING

    # Referencias del procesador de pagos
    stripe_payment_intent_id: str | None = None
    stripe_payment_id: str | None = None
    refund_id: str | None = None

    # Cancelación
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None

    # Timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Control de concurrencia
    lock_version: int = 0

    # === Propiedades calculadas ===

    @property
    def time_range(self) -> TimeRange:
        """Retorna el intervalo reservado como Value Object."""
        return TimeRange(start=self.start_time, end=self.end_time)

    @property
    def is_active(self) -> bool:
        """Una reserva activa ocupa su intervalo (pending o confirmed)."""
        return self.status in ACTIVE_STATUSES

    @property
    def is_paid(self) -> bool:
        return self.payment_status == BookingPaymentStatus.PAID

    def is_vendor(self, user_id: str) -> bool:
        return self.vendor_id == user_id

    def is_party(self, user_id: str) -> bool:
        """El proveedor o el cliente de la reserva."""
        return user_id in (self.vendor_id, self.user_id)

    # === Máquina de estados de la reserva ===

    def can_transition_to(self, target: BookingStatus) -> bool:
        return target in BOOKING_TRANSITIONS[self.status]

    def transition_to(self, target: BookingStatus) -> None:
        """Cambia el estado respetando la máquina de estados."""
        if target == self.status:
            return
        if not self.can_transition_to(target):
            raise InvalidStatusTransitionError("booking", self.status.value, target.value)
        self.status = target

    def cancel(self, cancelled_by: str, cancelled_at: datetime, reason: str | None = None) -> None:
        """Cancela la reserva y registra quién y cuándo."""
        if self.status == BookingStatus.CANCELLED:
            raise AlreadyCancelledError(self.id)
        self.transition_to(BookingStatus.CANCELLED)
        self.cancelled_by = cancelled_by
        self.cancelled_at = cancelled_at
        self.cancel_reason = reason

    # === Máquina de estados del pago ===

    def can_transition_payment_to(self, target: BookingPaymentStatus) -> bool:
        return target in PAYMENT_TRANSITIONS[self.payment_status]

    def transition_payment_to(self, target: BookingPaymentStatus) -> None:
        if not self.can_transition_payment_to(target):
            raise InvalidStatusTransitionError(
                "payment", self.payment_status.value, target.value
            )
        self.payment_status = target
