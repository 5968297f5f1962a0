"""Value Object Money - representa un valor monetario con su moneda."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def round_to_cents(value: Decimal) -> Decimal:
    """Redondea a centavos con ROUND_HALF_UP."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class FeeBreakdown:
    """
    Reparto de un monto entre comisión de plataforma y neto del proveedor.

    Siempre se cumple fee + net == amount.
    """

    amount: Decimal
    fee: Decimal
    net: Decimal

    def negated(self) -> "FeeBreakdown":
        """Retorna el mismo reparto con signo negativo (asientos de reembolso)."""
        return FeeBreakdown(amount=-self.amount, fee=-self.fee, net=-self.net)


@dataclass(frozen=True)
class Money:
    """
    Value Object inmutable que representa un monto monetario.

    Attributes:
        amount: Monto decimal en unidades mayores, redondeado a 2 decimales.
        currency_code: Código ISO 4217 de la moneda (ej: USD).
    """

    amount: Decimal
    currency_code: str = "USD"

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", round_to_cents(self.amount))
        object.__setattr__(self, "currency_code", self.currency_code.upper())

        if len(self.currency_code) != 3:
            raise ValueError(f"currency_code debe ser de 3 caracteres: {self.currency_code}")

        if self.amount < 0:
            raise ValueError(f"amount no puede ser negativo: {self.amount}")

    def is_zero(self) -> bool:
        return self.amount == Decimal("0")

    @classmethod
    def from_cents(cls, cents: int, currency_code: str = "USD") -> "Money":
        """Crea un Money desde centavos (útil para Stripe)."""
        return cls(amount=Decimal(cents) / 100, currency_code=currency_code)

    def to_cents(self) -> int:
        """Convierte a centavos enteros (útil para Stripe)."""
        return int((self.amount * 100).to_integral_value(rounding=ROUND_HALF_UP))

    def split_fee(self, rate: Decimal) -> FeeBreakdown:
        """
        Calcula la comisión de plataforma sobre el monto.

        La comisión se redondea una sola vez a centavos (ROUND_HALF_UP) y el
        neto es la diferencia exacta.
        """
        fee = round_to_cents(self.amount * Decimal(str(rate)))
        return FeeBreakdown(amount=self.amount, fee=fee, net=self.amount - fee)
