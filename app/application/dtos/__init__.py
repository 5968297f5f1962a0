"""DTOs (Data Transfer Objects) de la capa de aplicación."""

from app.application.dtos.booking_dto import BookingPatch, CustomerInfo
from app.application.dtos.listing_dto import ListingInput, ListingPatch
from app.application.dtos.metrics_dto import VendorMetricsDTO
from app.application.dtos.payment_dto import (
    PaymentRequestDTO,
    RefundDTO,
    WebhookAction,
    WebhookOutcome,
)

__all__ = [
    # Booking DTOs
    "BookingPatch",
    "CustomerInfo",
    # Listing DTOs
    "ListingInput",
    "ListingPatch",
    # Payment DTOs
    "PaymentRequestDTO",
    "RefundDTO",
    "WebhookAction",
    "WebhookOutcome",
    # Metrics DTOs
    "VendorMetricsDTO",
]
