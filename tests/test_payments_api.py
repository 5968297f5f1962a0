from datetime import datetime, timedelta, timezone

import pytest

from app.config import get_settings
from tests.support import CUSTOMER_ID, VENDOR_ID, auth, signed, webhook_event

API = "/api/v1"


@pytest.fixture
def booking_id(client) -> str:
    listing = client.post(
        f"{API}/listings",
        json={"title": "Wine tasting", "price": "100.00"},
        headers=auth(VENDOR_ID),
    ).json()
    client.patch(f"{API}/listings/{listing['id']}", json={"status": "active"}, headers=auth(VENDOR_ID))

    start = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=10)
    booking = client.post(
        f"{API}/bookings",
        json={
            "listing_id": listing["id"],
            "start_time": start.isoformat(),
            "end_time": (start + timedelta(hours=2)).isoformat(),
        },
        headers=auth(CUSTOMER_ID),
    )
    assert booking.status_code == 201
    return booking.json()["id"]


def _open_intent(client, booking_id: str) -> str:
    response = client.post(
        f"{API}/payments/intents",
        json={"booking_id": booking_id, "amount": "100.00"},
        headers=auth(CUSTOMER_ID),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["fee"] == "5.00"
    assert body["currency"] == "usd"
    assert body["client_secret"]
    return body["payment_intent_id"]


def _deliver(client, payload: bytes, signature: str | None = None):
    return client.post(
        f"{API}/webhooks/stripe",
        content=payload,
        headers={"Stripe-Signature": signature or signed(payload), "Content-Type": "application/json"},
    )


def test_payment_intent_requires_a_party(client, booking_id):
    response = client.post(
        f"{API}/payments/intents",
        json={"booking_id": booking_id, "amount": "100.00"},
        headers=auth("stranger"),
    )
    assert response.status_code == 403

    invalid = client.post(
        f"{API}/payments/intents",
        json={"booking_id": booking_id, "amount": "0"},
        headers=auth(CUSTOMER_ID),
    )
    assert invalid.status_code == 422


def test_full_payment_and_refund_flow(client, booking_id):
    intent_id = _open_intent(client, booking_id)

    payload = webhook_event("payment_intent.succeeded", intent_id, booking_id)
    delivered = _deliver(client, payload)
    assert delivered.status_code == 200
    assert delivered.json() == {"received": True, "action": "applied"}

    redelivered = _deliver(client, payload)
    assert redelivered.json()["action"] == "duplicate"

    booking = client.get(f"{API}/bookings/{booking_id}", headers=auth(VENDOR_ID)).json()
    assert booking["payment_status"] == "paid"
    assert booking["stripe_payment_id"] == intent_id

    refund = client.post(
        f"{API}/payments/refunds",
        json={"booking_id": booking_id, "amount": "40.00"},
        headers=auth(VENDOR_ID),
    )
    assert refund.status_code == 200
    assert refund.json()["payment_status"] == "partially_refunded"
    assert refund.json()["amount"] == "40.00"

    second = client.post(
        f"{API}/payments/refunds", json={"booking_id": booking_id}, headers=auth(VENDOR_ID)
    )
    assert second.status_code == 400
    assert second.json()["code"] == "NOT_PAID"

    rows = client.get(f"{API}/payments/transactions", headers=auth(VENDOR_ID)).json()
    assert [(r["status"], r["amount"]) for r in rows] == [
        ("refunded", "-40.00"),
        ("completed", "100.00"),
    ]

    metrics = client.get(f"{API}/metrics/vendor", headers=auth(VENDOR_ID)).json()
    assert metrics["total_bookings"] == 1
    assert metrics["total_revenue"] == "100.00"
    assert metrics["total_fees"] == "5.00"
    assert metrics["total_refunded"] == "40.00"
    assert metrics["net_revenue"] == "60.00"
    assert metrics["transaction_count"] == 2


def test_refund_without_payment(client, booking_id):
    response = client.post(
        f"{API}/payments/refunds", json={"booking_id": booking_id}, headers=auth(VENDOR_ID)
    )
    assert response.status_code == 400
    assert response.json()["code"] == "NO_PAYMENT"

    customer = client.post(
        f"{API}/payments/refunds", json={"booking_id": booking_id}, headers=auth(CUSTOMER_ID)
    )
    assert customer.status_code == 403


def test_failed_payment_webhook(client, booking_id):
    intent_id = _open_intent(client, booking_id)

    payload = webhook_event("payment_intent.payment_failed", intent_id, booking_id, event_id="evt_fail")
    assert _deliver(client, payload).json()["action"] == "applied"

    booking = client.get(f"{API}/bookings/{booking_id}", headers=auth(CUSTOMER_ID)).json()
    assert booking["payment_status"] == "failed"
    assert client.get(f"{API}/payments/transactions", headers=auth(VENDOR_ID)).json() == []


def test_tampered_webhook_is_rejected(client, booking_id):
    payload = webhook_event("payment_intent.succeeded", "pi_x", booking_id)
    signature = signed(payload)
    tampered = payload.replace(b"10000", b"99999")

    response = _deliver(client, tampered, signature)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SIGNATURE"

    unsigned = client.post(f"{API}/webhooks/stripe", content=payload)
    assert unsigned.status_code == 400


def test_unhandled_and_orphan_events_are_acknowledged(client):
    ignored = webhook_event("charge.refunded", "pi_x", None, event_id="evt_2")
    assert _deliver(client, ignored).json()["action"] == "ignored"

    orphan = webhook_event("payment_intent.succeeded", "pi_y", "bkg_unknown", event_id="evt_3")
    assert _deliver(client, orphan).json()["action"] == "booking_missing"


def test_webhooks_are_rejected_when_no_secret_is_configured(client, booking_id, monkeypatch):
    monkeypatch.delenv("STRIPE_WEBHOOK_SECRET")
    get_settings.cache_clear()

    payload = webhook_event("payment_intent.succeeded", "pi_forged", booking_id)
    unsigned = client.post(f"{API}/webhooks/stripe", content=payload)
    assert unsigned.status_code == 400
    assert unsigned.json()["code"] == "INVALID_SIGNATURE"
    assert _deliver(client, payload).status_code == 400

    booking = client.get(f"{API}/bookings/{booking_id}", headers=auth(CUSTOMER_ID)).json()
    assert booking["payment_status"] == "pending"
