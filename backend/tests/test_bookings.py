"""
Tests for booking endpoints: referential checks, email rules, duplicates.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import make_event_payload


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, test_event):
    response = await client.post(
        "/api/bookings",
        json={"event_id": test_event.id, "email": "  Ada@Example.COM "},
    )
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["event_id"] == test_event.id
    assert body["data"]["email"] == "ada@example.com"


@pytest.mark.asyncio
async def test_book_nonexistent_event(client: AsyncClient):
    """Unknown event id is rejected with 404 and nothing is stored."""
    response = await client.post("/api/bookings", json={"event_id": 99999, "email": "ada@example.com"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Event with ID 99999 does not exist"}

    listing = await client.get("/api/bookings")
    assert listing.json()["count"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "email",
    ["not-an-email", "ada@example", "ada @example.com", "", "a" * 310 + "@example.com"],
)
async def test_book_invalid_email(client: AsyncClient, test_event, email):
    response = await client.post("/api/bookings", json={"event_id": test_event.id, "email": email})
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


@pytest.mark.asyncio
async def test_book_missing_event_id(client: AsyncClient):
    response = await client.post("/api/bookings", json={"email": "ada@example.com"})
    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == ["event_id"]


@pytest.mark.asyncio
async def test_duplicate_booking(client: AsyncClient, test_event):
    """Same email for the same event twice returns 409; case is ignored."""
    first = await client.post("/api/bookings", json={"event_id": test_event.id, "email": "ada@example.com"})
    second = await client.post("/api/bookings", json={"event_id": test_event.id, "email": "ADA@example.com"})

    assert first.status_code == 201
    assert second.status_code == 409


@pytest.mark.asyncio
async def test_same_email_different_events(client: AsyncClient, test_event):
    other = await client.post("/api/events", json=make_event_payload(title="Vue Summit"))
    other_id = other.json()["data"]["id"]

    first = await client.post("/api/bookings", json={"event_id": test_event.id, "email": "ada@example.com"})
    second = await client.post("/api/bookings", json={"event_id": other_id, "email": "ada@example.com"})

    assert first.status_code == 201
    assert second.status_code == 201


@pytest.mark.asyncio
async def test_list_event_bookings(client: AsyncClient, test_event):
    await client.post("/api/bookings", json={"event_id": test_event.id, "email": "ada@example.com"})
    await client.post("/api/bookings", json={"event_id": test_event.id, "email": "grace@example.com"})

    response = await client.get(f"/api/events/{test_event.slug}/bookings")
    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    assert {b["email"] for b in body["data"]} == {"ada@example.com", "grace@example.com"}

    filtered = await client.get("/api/bookings", params={"event_id": test_event.id})
    assert filtered.json()["count"] == 2


@pytest.mark.asyncio
async def test_update_booking_email(client: AsyncClient, test_event):
    created = await client.post("/api/bookings", json={"event_id": test_event.id, "email": "ada@example.com"})
    booking_id = created.json()["data"]["id"]

    response = await client.put(
        f"/api/bookings/{booking_id}",
        json={"event_id": test_event.id, "email": "lovelace@example.com"},
    )
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "lovelace@example.com"


@pytest.mark.asyncio
async def test_update_booking_to_missing_event(client: AsyncClient, test_event):
    created = await client.post("/api/bookings", json={"event_id": test_event.id, "email": "ada@example.com"})
    booking_id = created.json()["data"]["id"]

    response = await client.put(
        f"/api/bookings/{booking_id}",
        json={"event_id": 424242, "email": "ada@example.com"},
    )
    assert response.status_code == 404

    listing = await client.get("/api/bookings")
    assert listing.json()["data"][0]["event_id"] == test_event.id


@pytest.mark.asyncio
async def test_update_unknown_booking(client: AsyncClient, test_event):
    response = await client.put("/api/bookings/999", json={"event_id": test_event.id, "email": "ada@example.com"})
    assert response.status_code == 404
