"""Constantes y helpers compartidos por los tests."""

import json
import time
from datetime import datetime, timedelta, timezone

import stripe

WEBHOOK_SECRET = "whsec_test_secret"
NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
VENDOR_ID = "vendor_1"
CUSTOMER_ID = "customer_1"


def slot(hours_from_now: int, duration_hours: int = 1) -> tuple[datetime, datetime]:
    """Intervalo [NOW + hours_from_now, + duration_hours)."""
    start = NOW + timedelta(hours=hours_from_now)
    return start, start + timedelta(hours=duration_hours)


def webhook_event(
    event_type: str,
    intent_id: str,
    booking_id: str | None,
    amount_cents: int = 10000,
    event_id: str = "evt_1",
) -> bytes:
    """Cuerpo JSON de un evento payment_intent.* como lo envía Stripe."""
    metadata = {"booking_id": booking_id} if booking_id else {}
    return json.dumps(
        {
            "id": event_id,
            "type": event_type,
            "data": {
                "object": {
                    "id": intent_id,
                    "object": "payment_intent",
                    "amount": amount_cents,
                    "amount_received": amount_cents,
                    "currency": "usd",
                    "status": "succeeded",
                    "metadata": metadata,
                }
            },
        }
    ).encode()


def sign_payload(payload: bytes, secret: str, timestamp: int | None = None) -> str:
    """Cabecera Stripe-Signature (t=...,v1=...) firmada con el mismo esquema que verifica el SDK."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = stripe.WebhookSignature._compute_signature(f"{timestamp}.{payload.decode()}", secret)
    return f"t={timestamp},v1={signature}"


def signed(payload: bytes) -> str:
    return sign_payload(payload, WEBHOOK_SECRET)


def auth(uid: str, role: str | None = None) -> dict[str, str]:
    credential = f"{uid}:{role}" if role else uid
    return {"Authorization": f"Bearer {credential}"}
