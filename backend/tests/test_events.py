"""
Tests for event endpoints: creation with slug derivation, lookup, update.
"""

import pytest
from httpx import AsyncClient

from tests.conftest import make_event_payload


@pytest.mark.asyncio
async def test_create_event(client: AsyncClient):
    response = await client.post("/api/events", json=make_event_payload(title="React Conf 2025!!"))
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["data"]["slug"] == "react-conf-2025"
    assert body["data"]["mode"] == "hybrid"
    assert body["message"] == "Event created successfully"


@pytest.mark.asyncio
async def test_create_event_same_title_gets_suffix(client: AsyncClient):
    """Same title twice: react-conf-2025, then react-conf-2025-1."""
    first = await client.post("/api/events", json=make_event_payload(title="React Conf 2025!!"))
    second = await client.post("/api/events", json=make_event_payload(title="React Conf 2025!!"))
    third = await client.post("/api/events", json=make_event_payload(title="react conf 2025"))

    assert first.json()["data"]["slug"] == "react-conf-2025"
    assert second.json()["data"]["slug"] == "react-conf-2025-1"
    assert third.json()["data"]["slug"] == "react-conf-2025-2"


@pytest.mark.asyncio
async def test_create_event_reports_every_violation(client: AsyncClient):
    """Short title, short description, bad mode and empty lists all come back together."""
    payload = make_event_payload(
        title="Hi",
        description="short",
        mode="in-person",
        agenda=[],
        tags=[],
    )
    response = await client.post("/api/events", json=payload)
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert fields == {"title", "description", "mode", "agenda", "tags"}

    listing = await client.get("/api/events")
    assert listing.json()["count"] == 0


@pytest.mark.asyncio
async def test_create_event_missing_fields(client: AsyncClient):
    payload = make_event_payload()
    del payload["venue"]
    del payload["organizer"]

    response = await client.post("/api/events", json=payload)
    assert response.status_code == 400
    assert {e["field"] for e in response.json()["errors"]} == {"venue", "organizer"}


@pytest.mark.asyncio
async def test_create_event_blank_date_and_time(client: AsyncClient):
    """Whitespace-only date and time are both rejected in one response."""
    response = await client.post("/api/events", json=make_event_payload(date="   ", time="  "))
    assert response.status_code == 400
    errors = {e["field"]: e["message"] for e in response.json()["errors"]}
    assert errors == {"date": "Date cannot be empty", "time": "Time cannot be empty"}


@pytest.mark.asyncio
async def test_create_event_blank_date_reported_with_other_violations(client: AsyncClient):
    """Blank date and time are listed alongside schema violations, not after them."""
    response = await client.post("/api/events", json=make_event_payload(title="Hi", date="  ", time=" "))
    assert response.status_code == 400
    errors = {e["field"]: e["message"] for e in response.json()["errors"]}
    assert set(errors) == {"title", "date", "time"}
    assert errors["date"] == "Date cannot be empty"
    assert errors["time"] == "Time cannot be empty"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field, value",
    [
        ("venue", "V" * 256),
        ("location", "L" * 256),
        ("audience", "A" * 256),
        ("organizer", "O" * 256),
        ("date", "D" * 101),
        ("time", "T" * 101),
        ("image", "https://example.com/" + "i" * 2048),
        ("title", "T" * 201),
    ],
)
async def test_create_event_rejects_values_wider_than_columns(client: AsyncClient, field, value):
    response = await client.post("/api/events", json=make_event_payload(**{field: value}))
    assert response.status_code == 400
    assert [e["field"] for e in response.json()["errors"]] == [field]

    listing = await client.get("/api/events")
    assert listing.json()["count"] == 0


@pytest.mark.asyncio
async def test_create_event_length_checked_after_trim(client: AsyncClient):
    response = await client.post("/api/events", json=make_event_payload(venue="  " + "V" * 255 + "  "))
    assert response.status_code == 201
    assert response.json()["data"]["venue"] == "V" * 255


@pytest.mark.asyncio
async def test_create_event_normalizes_fields(client: AsyncClient):
    payload = make_event_payload(
        title="  Vue Summit  ",
        mode="ONLINE",
        date=" 2025-05-15 ",
        time="  10:00 AM  ",
        tags=["vue", "vue", "frontend"],
    )
    response = await client.post("/api/events", json=payload)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["title"] == "Vue Summit"
    assert data["slug"] == "vue-summit"
    assert data["mode"] == "online"
    assert data["date"] == "2025-05-15"
    assert data["time"] == "10:00 AM"
    assert data["tags"] == ["vue", "frontend"]


@pytest.mark.asyncio
async def test_list_events(client: AsyncClient, test_event):
    response = await client.get("/api/events")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["count"] == 1
    assert body["data"][0]["slug"] == test_event.slug


@pytest.mark.asyncio
async def test_get_event(client: AsyncClient, test_event):
    response = await client.get(f"/api/events/{test_event.slug}")
    assert response.status_code == 200
    assert response.json()["data"]["id"] == test_event.id


@pytest.mark.asyncio
async def test_get_event_not_found(client: AsyncClient):
    response = await client.get("/api/events/no-such-event")
    assert response.status_code == 404
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_update_event_keeps_slug_when_title_unchanged(client: AsyncClient, test_event):
    payload = make_event_payload(venue="Moscone Center")
    response = await client.put(f"/api/events/{test_event.slug}", json=payload)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["venue"] == "Moscone Center"
    assert data["slug"] == "react-conf-2025"


@pytest.mark.asyncio
async def test_update_event_rederives_slug_on_title_change(client: AsyncClient, test_event):
    payload = make_event_payload(title="React Summit 2025")
    response = await client.put(f"/api/events/{test_event.slug}", json=payload)
    assert response.status_code == 200
    assert response.json()["data"]["slug"] == "react-summit-2025"

    old = await client.get("/api/events/react-conf-2025")
    assert old.status_code == 404


@pytest.mark.asyncio
async def test_update_event_retitle_to_own_title_keeps_slug(client: AsyncClient, test_event):
    """A record never collides with itself when its slug is re-derived."""
    payload = make_event_payload(title="React  Conf 2025")
    response = await client.put(f"/api/events/{test_event.slug}", json=payload)
    assert response.status_code == 200
    assert response.json()["data"]["slug"] == "react-conf-2025"


@pytest.mark.asyncio
async def test_update_event_invalid_payload(client: AsyncClient, test_event):
    response = await client.put(f"/api/events/{test_event.slug}", json=make_event_payload(agenda=[]))
    assert response.status_code == 400

    unchanged = await client.get(f"/api/events/{test_event.slug}")
    assert unchanged.json()["data"]["agenda"] == ["Keynote", "Talks", "Q&A"]


@pytest.mark.asyncio
async def test_update_unknown_event(client: AsyncClient):
    response = await client.put("/api/events/missing", json=make_event_payload())
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_health_reports_database(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["database"] == "connected"
    assert body["cache"] == {"status": "disabled"}


@pytest.mark.asyncio
async def test_metrics_endpoint(client: AsyncClient):
    await client.post("/api/events", json=make_event_payload())
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "record_writes_total" in response.text
