"""DTOs para métricas del proveedor."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class VendorMetricsDTO:
    """
    Métricas derivadas de reservas y asientos contables.

    total_revenue suma solo los asientos "completed"; los reembolsos se
    reportan aparte en total_refunded y se descuentan en net_revenue.
    """

    vendor_id: str
    total_bookings: int = 0
    pending: int = 0
    confirmed: int = 0
    cancelled: int = 0
    completed: int = 0
    upcoming: int = 0
    past: int = 0
    total_revenue: Decimal = Decimal("0.00")
    total_fees: Decimal = Decimal("0.00")
    total_net: Decimal = Decimal("0.00")
    total_refunded: Decimal = Decimal("0.00")
    net_revenue: Decimal = Decimal("0.00")
    transaction_count: int = 0
