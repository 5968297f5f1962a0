from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, condecimal, constr, model_validator

from app.application.dtos.booking_dto import BookingPatch, CustomerInfo
from app.domain.entities.booking import BookingPaymentStatus, BookingStatus

Money = condecimal(max_digits=12, decimal_places=2)


class CreateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    listing_id: constr(strip_whitespace=True, min_length=1)
    start_time: datetime
    end_time: datetime
    customer_name: str | None = None
    customer_email: EmailStr | None = None
    customer_phone: str | None = None
    notes: str | None = None

    def customer_info(self, default_name: str | None = None, default_email: str | None = None) -> CustomerInfo:
        """Contact data for the booking; omitted name and email fall back to the caller."""
        return CustomerInfo(
            name=self.customer_name or default_name,
            email=str(self.customer_email) if self.customer_email else default_email,
            phone=self.customer_phone,
            notes=self.notes,
        )


class UpdateBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: BookingStatus | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    notes: str | None = None
    customer_name: str | None = None
    customer_email: EmailStr | None = None
    customer_phone: str | None = None
    total_amount: Money | None = None

    @model_validator(mode="after")
    def validate_not_empty(self) -> "UpdateBookingRequest":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self

    def to_patch(self) -> BookingPatch:
        return BookingPatch(
            status=self.status,
            start_time=self.start_time,
            end_time=self.end_time,
            notes=self.notes,
            customer_name=self.customer_name,
            customer_email=str(self.customer_email) if self.customer_email else None,
            customer_phone=self.customer_phone,
            total_amount=self.total_amount,
        )


class CancelBookingRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str | None = None


class BookingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    listing_id: str
    vendor_id: str
    user_id: str
    start_time: datetime
    end_time: datetime
    total_amount: Decimal
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    notes: str | None = None
    status: BookingStatus
    payment_status: BookingPaymentStatus
    stripe_payment_intent_id: str | None = None
    stripe_payment_id: str | None = None
    refund_id: str | None = None
    cancelled_by: str | None = None
    cancelled_at: datetime | None = None
    cancel_reason: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    lock_version: int


class AvailabilityResponse(BaseModel):
    listing_id: str
    start_time: datetime
    end_time: datetime
    available: bool
