from datetime import datetime, timedelta, timezone

import pytest

from app.api.auth import get_identity_verifier
from app.application.interfaces.identity import Identity, IdentityVerifier
from app.main import app
from tests.support import CUSTOMER_ID, VENDOR_ID, auth

API = "/api/v1"


def _future(days: int, hours: int = 0) -> datetime:
    base = datetime.now(timezone.utc).replace(minute=0, second=0, microsecond=0)
    return base + timedelta(days=days, hours=hours)


@pytest.fixture
def listing_id(client) -> str:
    created = client.post(
        f"{API}/listings",
        json={"title": "Cooking class", "price": "100.00", "category": "food"},
        headers=auth(VENDOR_ID, "vendor"),
    )
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "pending"

    activated = client.patch(
        f"{API}/listings/{body['id']}",
        json={"status": "active"},
        headers=auth(VENDOR_ID, "vendor"),
    )
    assert activated.status_code == 200
    return body["id"]


def _create_booking(client, listing_id: str, start: datetime, hours: int = 1, user: str = CUSTOMER_ID):
    return client.post(
        f"{API}/bookings",
        json={
            "listing_id": listing_id,
            "start_time": start.isoformat(),
            "end_time": (start + timedelta(hours=hours)).isoformat(),
            "customer_name": "Ana Perez",
            "customer_email": "ana@example.com",
        },
        headers=auth(user),
    )


def test_requests_without_credentials_are_rejected(client):
    response = client.get(f"{API}/bookings/vendor")
    assert response.status_code == 401
    assert response.json()["code"] == "UNAUTHORIZED"

    response = client.get(f"{API}/bookings/vendor", headers={"Authorization": "Basic abc"})
    assert response.status_code == 401


def test_create_and_get_booking(client, listing_id):
    start = _future(days=3)
    created = _create_booking(client, listing_id, start)

    assert created.status_code == 201
    booking = created.json()
    assert booking["status"] == "pending"
    assert booking["payment_status"] == "pending"
    assert booking["vendor_id"] == VENDOR_ID
    assert booking["user_id"] == CUSTOMER_ID
    assert booking["total_amount"] == "100.00"

    fetched = client.get(f"{API}/bookings/{booking['id']}", headers=auth(VENDOR_ID))
    assert fetched.status_code == 200
    assert fetched.json()["customer_email"] == "ana@example.com"

    forbidden = client.get(f"{API}/bookings/{booking['id']}", headers=auth("stranger"))
    assert forbidden.status_code == 403
    assert forbidden.json()["code"] == "FORBIDDEN"


def test_overlapping_booking_returns_409(client, listing_id):
    start = _future(days=3)
    assert _create_booking(client, listing_id, start, hours=2).status_code == 201

    conflict = _create_booking(client, listing_id, start + timedelta(hours=1), user="customer_2")
    assert conflict.status_code == 409
    assert conflict.json()["code"] == "TIME_SLOT_UNAVAILABLE"

    adjacent = _create_booking(client, listing_id, start + timedelta(hours=2), user="customer_2")
    assert adjacent.status_code == 201


def test_invalid_range_returns_400(client, listing_id):
    start = _future(days=3)
    response = _create_booking(client, listing_id, start, hours=0)
    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_RANGE"


def test_booking_inactive_or_unknown_listing(client):
    draft = client.post(
        f"{API}/listings",
        json={"title": "Draft", "price": "10.00"},
        headers=auth(VENDOR_ID),
    ).json()

    inactive = _create_booking(client, draft["id"], _future(days=2))
    assert inactive.status_code == 400
    assert inactive.json()["code"] == "LISTING_INACTIVE"

    missing = _create_booking(client, "lst_missing", _future(days=2))
    assert missing.status_code == 404


def test_availability_endpoint(client, listing_id):
    start = _future(days=5)
    _create_booking(client, listing_id, start)

    params = {
        "listing_id": listing_id,
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(minutes=30)).isoformat(),
    }
    taken = client.get(f"{API}/bookings/availability", params=params)
    assert taken.status_code == 200
    assert taken.json()["available"] is False

    params["start_time"] = (start + timedelta(hours=1)).isoformat()
    params["end_time"] = (start + timedelta(hours=2)).isoformat()
    assert client.get(f"{API}/bookings/availability", params=params).json()["available"] is True


def test_vendor_updates_and_customer_cancels(client, listing_id):
    booking = _create_booking(client, listing_id, _future(days=4)).json()

    denied = client.patch(
        f"{API}/bookings/{booking['id']}",
        json={"status": "confirmed"},
        headers=auth(CUSTOMER_ID),
    )
    assert denied.status_code == 403

    confirmed = client.patch(
        f"{API}/bookings/{booking['id']}",
        json={"status": "confirmed", "notes": "bring apron"},
        headers=auth(VENDOR_ID),
    )
    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "confirmed"
    assert confirmed.json()["lock_version"] == 1

    illegal = client.patch(
        f"{API}/bookings/{booking['id']}",
        json={"status": "pending"},
        headers=auth(VENDOR_ID),
    )
    assert illegal.status_code == 409
    assert illegal.json()["code"] == "INVALID_STATUS_TRANSITION"

    cancelled = client.post(
        f"{API}/bookings/{booking['id']}/cancel",
        json={"reason": "travel plans changed"},
        headers=auth(CUSTOMER_ID),
    )
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"
    assert cancelled.json()["cancelled_by"] == CUSTOMER_ID

    again = client.post(f"{API}/bookings/{booking['id']}/cancel", headers=auth(CUSTOMER_ID))
    assert again.status_code == 400
    assert again.json()["code"] == "ALREADY_CANCELLED"


def test_empty_update_is_rejected(client, listing_id):
    booking = _create_booking(client, listing_id, _future(days=4)).json()
    response = client.patch(f"{API}/bookings/{booking['id']}", json={}, headers=auth(VENDOR_ID))
    assert response.status_code == 422


def test_booking_read_endpoints(client, listing_id):
    first = _create_booking(client, listing_id, _future(days=2)).json()
    second = _create_booking(client, listing_id, _future(days=6), user="customer_2").json()

    vendor = client.get(f"{API}/bookings/vendor", headers=auth(VENDOR_ID)).json()
    assert [b["id"] for b in vendor] == [first["id"], second["id"]]

    customer = client.get(f"{API}/bookings/customer", headers=auth("customer_2")).json()
    assert [b["id"] for b in customer] == [second["id"]]

    upcoming = client.get(f"{API}/bookings/upcoming", params={"limit": 1}, headers=auth(VENDOR_ID)).json()
    assert [b["id"] for b in upcoming] == [first["id"]]

    window = client.get(
        f"{API}/bookings/range",
        params={"start": _future(days=5).isoformat(), "end": _future(days=7).isoformat()},
        headers=auth(VENDOR_ID),
    ).json()
    assert [b["id"] for b in window] == [second["id"]]


def test_listing_endpoints(client, listing_id):
    mine = client.get(f"{API}/listings", headers=auth(VENDOR_ID)).json()
    assert [lst["id"] for lst in mine] == [listing_id]

    public = client.get(f"{API}/listings/{listing_id}")
    assert public.status_code == 200
    assert public.json()["price"] == "100.00"

    not_owner = client.patch(
        f"{API}/listings/{listing_id}", json={"title": "Hijacked"}, headers=auth("vendor_2")
    )
    assert not_owner.status_code == 403

    invalid = client.post(
        f"{API}/listings", json={"title": "Bad", "price": "-5"}, headers=auth(VENDOR_ID)
    )
    assert invalid.status_code == 422


def test_listing_delete_requires_no_active_bookings(client, listing_id):
    booking = _create_booking(client, listing_id, _future(days=2)).json()

    blocked = client.delete(f"{API}/listings/{listing_id}", headers=auth(VENDOR_ID))
    assert blocked.status_code == 409
    assert blocked.json()["code"] == "LISTING_HAS_ACTIVE_BOOKINGS"

    client.post(f"{API}/bookings/{booking['id']}/cancel", headers=auth(CUSTOMER_ID))
    deleted = client.delete(f"{API}/listings/{listing_id}", headers=auth(VENDOR_ID))
    assert deleted.status_code == 204
    assert client.get(f"{API}/listings/{listing_id}").status_code == 404


class ProfileIdentityVerifier(IdentityVerifier):
    """Verificador con perfil, como el de un proveedor de identidad real."""

    async def verify(self, credential: str | None) -> Identity:
        return Identity(uid=credential, name="Ana Perez", email="ana@example.com")


def test_customer_contact_defaults_to_caller_profile(client, listing_id):
    app.dependency_overrides[get_identity_verifier] = ProfileIdentityVerifier
    try:
        start = _future(days=3)
        implicit = client.post(
            f"{API}/bookings",
            json={
                "listing_id": listing_id,
                "start_time": start.isoformat(),
                "end_time": (start + timedelta(hours=1)).isoformat(),
            },
            headers=auth(CUSTOMER_ID),
        )
        explicit = client.post(
            f"{API}/bookings",
            json={
                "listing_id": listing_id,
                "start_time": (start + timedelta(hours=1)).isoformat(),
                "end_time": (start + timedelta(hours=2)).isoformat(),
                "customer_name": "Luis Gomez",
            },
            headers=auth(CUSTOMER_ID),
        )
    finally:
        app.dependency_overrides.pop(get_identity_verifier, None)

    assert implicit.status_code == 201
    assert implicit.json()["customer_name"] == "Ana Perez"
    assert implicit.json()["customer_email"] == "ana@example.com"
    assert explicit.json()["customer_name"] == "Luis Gomez"
    assert explicit.json()["customer_email"] == "ana@example.com"
