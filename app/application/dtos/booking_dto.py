"""DTOs para reservas."""

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from typing import Any

from app.domain.entities.booking import BookingStatus


@dataclass
class CustomerInfo:
    """Datos de contacto del cliente capturados al reservar."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    notes: str | None = None


@dataclass
class BookingPatch:
    """
    Cambios permitidos sobre una reserva.

    Solo estos campos son editables; un campo en None significa "sin cambio".
    El estado de pago nunca se edita por esta vía.
    """

    status: BookingStatus | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    total_amount: Decimal | None = None

    @property
    def changes_time(self) -> bool:
        return self.start_time is not None or self.end_time is not None

    def provided(self) -> dict[str, Any]:
        """Retorna solo los campos presentes."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
