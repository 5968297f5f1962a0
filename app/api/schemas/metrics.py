from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class VendorMetricsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    vendor_id: str
    total_bookings: int
    pending: int
    confirmed: int
    cancelled: int
    completed: int
    upcoming: int
    past: int
    total_revenue: Decimal
    total_fees: Decimal
    total_net: Decimal
    total_refunded: Decimal
    net_revenue: Decimal
    transaction_count: int
