"""Tests for the HTTP API."""

from datetime import date

import pytest
from httpx import AsyncClient

from rentdesk.errors import StoreError
from rentdesk.main import app
from rentdesk.state.store import MemoryDocumentStore


async def add_item(client: AsyncClient, name: str, quantity: int) -> dict:
    response = await client.post(
        "/api/v1/inventory",
        json={"name": name, "category": "Tents", "quantity": quantity},
    )
    assert response.status_code == 201
    return response.json()


def reservation_body(item_id: str, quantity: int, **overrides) -> dict:
    body = {
        "clientName": "Ana",
        "location": "Garden Hall",
        "dateFrom": "2025-06-01",
        "dateTo": "2025-06-03",
        "time": "14:00",
        "items": [{"itemId": item_id, "quantity": quantity}],
        "totalPrice": 1000,
        "notes": "Back gate",
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_health(test_client: AsyncClient) -> None:
    response = await test_client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_reservation_lifecycle(test_client: AsyncClient) -> None:
    """Test create, availability, finish and delete through the API."""
    item = await add_item(test_client, "Party tent", 5)

    response = await test_client.post(
        "/api/v1/reservations", json=reservation_body(item["id"], 2)
    )
    assert response.status_code == 201
    reservation = response.json()
    assert reservation["status"] == "active"
    assert reservation["items"][0]["itemName"] == "Party tent"

    inventory = (await test_client.get("/api/v1/inventory")).json()
    assert inventory[0]["quantity"] == 3

    during = await test_client.get(
        "/api/v1/availability", params={"date_from": "2025-06-02"}
    )
    after = await test_client.get(
        "/api/v1/availability", params={"date_from": "2025-06-04"}
    )
    assert during.json() == []
    assert [i["id"] for i in after.json()] == [item["id"]]

    finished = await test_client.post(f"/api/v1/reservations/{reservation['id']}/finish")
    assert finished.json()["status"] == "finished"
    during = await test_client.get(
        "/api/v1/availability", params={"date_from": "2025-06-02"}
    )
    assert [i["id"] for i in during.json()] == [item["id"]]

    response = await test_client.delete(f"/api/v1/reservations/{reservation['id']}")
    assert response.status_code == 204
    inventory = (await test_client.get("/api/v1/inventory")).json()
    assert inventory[0]["quantity"] == 5


@pytest.mark.asyncio
async def test_validation_errors_are_per_field(test_client: AsyncClient) -> None:
    item = await add_item(test_client, "Party tent", 5)

    response = await test_client.post(
        "/api/v1/reservations",
        json=reservation_body(item["id"], 0, clientName="", totalPrice=0),
    )

    assert response.status_code == 422
    assert set(response.json()["detail"]["errors"]) == {
        "clientName",
        "totalPrice",
        "item_0_quantity",
    }


@pytest.mark.asyncio
async def test_blank_form_fields_are_reported_per_field(test_client: AsyncClient) -> None:
    """Test that an untouched form reports every field, not a parsing error."""
    response = await test_client.post(
        "/api/v1/reservations",
        json={
            "clientName": "",
            "location": "",
            "dateFrom": "",
            "dateTo": "",
            "time": "",
            "items": [{"itemId": "", "quantity": ""}],
            "totalPrice": "",
            "notes": "",
        },
    )

    assert response.status_code == 422
    errors = response.json()["detail"]["errors"]
    assert errors["dateFrom"] == "Start date is required"
    assert set(errors) == {
        "clientName",
        "location",
        "dateFrom",
        "dateTo",
        "time",
        "totalPrice",
        "item_0_id",
        "item_0_quantity",
    }


@pytest.mark.asyncio
async def test_unknown_item_is_rejected(test_client: AsyncClient) -> None:
    response = await test_client.post(
        "/api/v1/reservations", json=reservation_body("no-such-item", 1)
    )

    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {"item_0_id": "Select equipment"}
    assert (await test_client.get("/api/v1/reservations")).json() == []


@pytest.mark.asyncio
async def test_reservations_listed_newest_first(test_client: AsyncClient) -> None:
    item = await add_item(test_client, "Party tent", 5)
    for day in ("2025-06-10", "2025-08-01", "2025-07-04"):
        await test_client.post(
            "/api/v1/reservations",
            json=reservation_body(item["id"], 1, dateFrom=day, dateTo=day),
        )

    response = await test_client.get("/api/v1/reservations")

    assert [r["dateFrom"] for r in response.json()] == [
        "2025-08-01",
        "2025-07-04",
        "2025-06-10",
    ]


@pytest.mark.asyncio
async def test_duplicate_inventory_name(test_client: AsyncClient) -> None:
    await add_item(test_client, "Party tent", 5)

    response = await test_client.post(
        "/api/v1/inventory",
        json={"name": "party TENT", "category": "Tents", "quantity": 1},
    )

    assert response.status_code == 422
    assert "name" in response.json()["detail"]["errors"]


@pytest.mark.asyncio
async def test_adjust_quantity(test_client: AsyncClient) -> None:
    item = await add_item(test_client, "Party tent", 5)

    up = await test_client.post(f"/api/v1/inventory/{item['id']}/adjust", json={"delta": 5})
    too_far = await test_client.post(
        f"/api/v1/inventory/{item['id']}/adjust", json={"delta": -11}
    )

    assert up.json()["quantity"] == 10
    assert too_far.status_code == 422


@pytest.mark.asyncio
async def test_unknown_reservation_returns_404(test_client: AsyncClient) -> None:
    response = await test_client.post("/api/v1/reservations/missing/finish")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_dashboard(test_client: AsyncClient) -> None:
    item = await add_item(test_client, "Party tent", 5)
    await test_client.post(
        "/api/v1/reservations",
        json=reservation_body(item["id"], 1, dateFrom="2025-03-05", dateTo="2025-03-06"),
    )
    await test_client.post(
        "/api/v1/reservations",
        json=reservation_body(
            item["id"], 1, dateFrom="2025-03-31", dateTo="2025-04-02", totalPrice=500
        ),
    )

    response = await test_client.get(
        "/api/v1/dashboard", params={"year": 2025, "month": 3, "day": "2025-03-05"}
    )
    data = response.json()

    assert response.status_code == 200
    assert data["reservationCount"] == 2
    assert data["revenue"] == 1500
    assert data["totalStock"] == 3
    assert [i["name"] for i in data["lowStock"]] == ["Party tent"]
    assert len(data["calendar"]) == 42
    assert len(data["selectedDayReservations"]) == 1
    marked = [cell["date"] for cell in data["calendar"] if cell["hasReservation"]]
    assert marked[:2] == ["2025-03-05", "2025-03-06"]
    assert "2025-04-01" in marked


@pytest.mark.asyncio
async def test_item_reservations(test_client: AsyncClient) -> None:
    item = await add_item(test_client, "Party tent", 5)
    today = date.today().isoformat()
    await test_client.post(
        "/api/v1/reservations",
        json=reservation_body(item["id"], 1, dateFrom=today, dateTo=today),
    )

    response = await test_client.get(f"/api/v1/inventory/{item['id']}/reservations")
    data = response.json()

    assert data["stockLevel"] == "low"
    assert data["reservedUntil"] == today
    assert data["windows"] == [{"start": today, "end": today}]


class UnavailableStore(MemoryDocumentStore):
    """Store that fails every write."""

    async def create(self, collection, fields) -> str:
        raise StoreError("connection refused")


@pytest.mark.asyncio
async def test_store_failure_returns_503(test_client: AsyncClient) -> None:
    app.state.store = UnavailableStore()

    response = await test_client.post(
        "/api/v1/inventory",
        json={"name": "Tent", "category": "Tents", "quantity": 1},
    )

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_dashboard_steps_between_months(test_client: AsyncClient) -> None:
    back = await test_client.get(
        "/api/v1/dashboard", params={"year": 2025, "month": 1, "step": -1}
    )
    forward = await test_client.get(
        "/api/v1/dashboard", params={"year": 2025, "month": 12, "step": 1}
    )

    assert (back.json()["year"], back.json()["month"]) == (2024, 12)
    assert (forward.json()["year"], forward.json()["month"]) == (2026, 1)
