"""DTOs para listings."""

from dataclasses import dataclass, field, fields
from decimal import Decimal
from typing import Any

from app.domain.entities.listing import ListingStatus


@dataclass
class ListingInput:
    title: str
    price: Decimal
    description: str = ""
    category: str | None = None
    images: list[str] = field(default_factory=list)
    documents: list[str] = field(default_factory=list)


@dataclass
class ListingPatch:
    """Cambios permitidos sobre un listing; None significa "sin cambio"."""

    title: str | None = None
    description: str | None = None
    price: Decimal | None = None
    category: str | None = None
    status: ListingStatus | None = None
    images: list[str] | None = None
    documents: list[str] | None = None

    def provided(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
