"""Value Objects del dominio de reservas."""

from app.domain.value_objects.money import FeeBreakdown, Money, round_to_cents
from app.domain.value_objects.time_range import TimeRange, ensure_utc

__all__ = [
    "FeeBreakdown",
    "Money",
    "TimeRange",
    "ensure_utc",
    "round_to_cents",
]
