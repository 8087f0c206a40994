"""Seed a demo warehouse and a few reservations."""

import asyncio
from datetime import date, timedelta
from decimal import Decimal

from rentdesk.errors import ValidationFailed
from rentdesk.models.inventory import InventoryItemInput
from rentdesk.models.reservation import ReservationInput, ReservationLineInput
from rentdesk.services.inventory import InventoryService
from rentdesk.services.reservations import ReservationService
from rentdesk.state.store import RedisDocumentStore

INVENTORY = [
    InventoryItemInput(name="Folding chair", category="Chairs", quantity=200),
    InventoryItemInput(name="Chiavari chair", category="Chairs", quantity=80),
    InventoryItemInput(name="Round table 180cm", category="Tables", quantity=25),
    InventoryItemInput(name="Banquet table", category="Tables", quantity=30),
    InventoryItemInput(name="Party tent 6x12", category="Tents", quantity=4),
    InventoryItemInput(name="Pagoda 5x5", category="Pagodas", quantity=6),
    InventoryItemInput(name="Patio heater", category="Other", quantity=8),
]


async def seed_inventory(service: InventoryService) -> dict[str, str]:
    """Create the warehouse items; returns item ids by name."""
    print("Seeding inventory...")

    ids = {}
    for payload in INVENTORY:
        try:
            item = await service.add_item(payload)
        except ValidationFailed as e:
            print(f"  - skipped {payload.name}: {e}")
            continue
        ids[item.name] = item.id
        print(f"  ✓ {item.name} ({item.quantity})")

    return ids


async def seed_reservations(service: ReservationService, ids: dict[str, str]) -> None:
    """Create a few bookings around today."""
    print("\nSeeding reservations...")

    today = date.today()
    bookings = [
        ReservationInput(
            client_name="Ana Petrović",
            location="Garden Hall, Main Street 12",
            date_from=today + timedelta(days=2),
            date_to=today + timedelta(days=3),
            time="14:00",
            items=[
                ReservationLineInput(item_id=ids.get("Folding chair", ""), quantity=60),
                ReservationLineInput(item_id=ids.get("Round table 180cm", ""), quantity=8),
            ],
            total_price=Decimal("45000"),
            notes="Deliver through the back gate",
        ),
        ReservationInput(
            client_name="Marko Jovanović",
            location="Riverside Park",
            date_from=today + timedelta(days=5),
            date_to=today + timedelta(days=7),
            time="09:30",
            items=[
                ReservationLineInput(item_id=ids.get("Party tent 6x12", ""), quantity=2),
                ReservationLineInput(item_id=ids.get("Patio heater", ""), quantity=4),
            ],
            total_price=Decimal("78000"),
        ),
    ]

    for payload in bookings:
        try:
            reservation = await service.create(payload)
        except ValidationFailed as e:
            print(f"  - skipped {payload.client_name}: {e}")
            continue
        print(
            f"  ✓ {reservation.client_name}: "
            f"{reservation.date_from} → {reservation.date_to}"
        )


async def main() -> None:
    store = RedisDocumentStore()
    await store.connect()

    try:
        ids = await seed_inventory(InventoryService(store))
        await seed_reservations(ReservationService(store), ids)
    finally:
        await store.disconnect()

    print("\n✓ Seed data created\n")


if __name__ == "__main__":
    asyncio.run(main())
