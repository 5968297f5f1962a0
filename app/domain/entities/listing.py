"""Entidad Listing - servicio publicado por un proveedor."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ListingStatus(str, Enum):
    """Estados posibles de un listing."""

    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Listing:
    """
    Servicio reservable publicado por un proveedor.

    Solo el proveedor dueño puede modificarlo. Las imágenes y documentos se
    guardan como URLs de un almacenamiento externo.
    """

    id: str
    vendor_id: str
    title: str
    price: Decimal
    description: str = ""
    category: str | None = None
    status: ListingStatus = ListingStatus.PENDING
    images: list[str] = field(default_factory=list)
    documents: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    # Token de versión que se incrementa con cada reserva escrita contra el listing
    booking_version: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == ListingStatus.ACTIVE

    def is_owned_by(self, user_id: str) -> bool:
        return self.vendor_id == user_id
