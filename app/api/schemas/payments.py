from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, condecimal, field_validator

from app.domain.entities.booking import BookingPaymentStatus
from app.domain.entities.transaction import TransactionStatus

Money = condecimal(max_digits=12, decimal_places=2)


class CreatePaymentIntentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: str
    amount: Money
    customer_id: str | None = None

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("amount must be greater than 0")
        return value


class PaymentIntentResponse(BaseModel):
    booking_id: str
    payment_intent_id: str
    client_secret: str | None
    amount: Money
    fee: Money
    currency: str
    status: str


class RefundRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    booking_id: str
    amount: Money | None = None
    reason: str | None = None


class RefundResponse(BaseModel):
    booking_id: str
    refund_id: str
    amount: Money
    status: str
    payment_status: BookingPaymentStatus


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class WebhookAck(BaseModel):
    received: bool = True
    action: str | None = None


class PaymentIntentObject(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    amount: int = 0
    amount_received: int | None = None
    currency: str | None = None
    status: str | None = None
    latest_charge: str | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    @property
    def charged_cents(self) -> int:
        return self.amount_received or self.amount


class StripeWebhookEnvelope(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str
    data: dict[str, Any]

    def data_object(self) -> dict[str, Any]:
        obj = self.data.get("object")
        return obj if isinstance(obj, dict) else {}
