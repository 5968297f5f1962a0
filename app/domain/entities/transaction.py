"""Entidad Transaction - asiento del libro contable de pagos."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from app.domain.value_objects.money import FeeBreakdown


class TransactionStatus(str, Enum):
    """Tipos de asiento."""

    COMPLETED = "completed"
    REFUNDED = "refunded"


@dataclass
class Transaction:
    """
    Asiento inmutable del libro contable (solo se agregan, nunca se editan).

    Convención de signos: los asientos "completed" son positivos y los
    "refunded" llevan monto, comisión y neto negativos. En ambos casos
    fee + net == amount.
    """

    id: str
    booking_id: str
    vendor_id: str
    amount: Decimal
    fee: Decimal
    net: Decimal
    external_payment_id: str
    status: TransactionStatus
    refund_id: str | None = None
    created_at: datetime | None = None

    @property
    def breakdown(self) -> FeeBreakdown:
        return FeeBreakdown(amount=self.amount, fee=self.fee, net=self.net)

    @classmethod
    def completed(
        cls,
        transaction_id: str,
        booking_id: str,
        vendor_id: str,
        breakdown: FeeBreakdown,
        external_payment_id: str,
        created_at: datetime,
    ) -> "Transaction":
        """Factory para el asiento de un cobro exitoso."""
        return cls(
            id=transaction_id,
            booking_id=booking_id,
            vendor_id=vendor_id,
            amount=breakdown.amount,
            fee=breakdown.fee,
            net=breakdown.net,
            external_payment_id=external_payment_id,
            status=TransactionStatus.COMPLETED,
            created_at=created_at,
        )

    @classmethod
    def refund(
        cls,
        transaction_id: str,
        booking_id: str,
        vendor_id: str,
        breakdown: FeeBreakdown,
        external_payment_id: str,
        refund_id: str,
        created_at: datetime,
    ) -> "Transaction":
        """Factory para el asiento de un reembolso (montos negados)."""
        negative = breakdown.negated()
        return cls(
            id=transaction_id,
            booking_id=booking_id,
            vendor_id=vendor_id,
            amount=negative.amount,
            fee=negative.fee,
            net=negative.net,
            external_payment_id=external_payment_id,
            status=TransactionStatus.REFUNDED,
            refund_id=refund_id,
            created_at=created_at,
        )
