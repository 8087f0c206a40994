"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from rentdesk.main import app
from rentdesk.models.inventory import InventoryItem, InventoryItemInput
from rentdesk.models.reservation import (
    Reservation,
    ReservationInput,
    ReservationLine,
    ReservationLineInput,
    ReservationStatus,
)
from rentdesk.services.inventory import InventoryService
from rentdesk.services.reservations import ReservationService
from rentdesk.state.store import MemoryDocumentStore
from rentdesk.state.sync import LiveSync


@pytest.fixture
def store() -> MemoryDocumentStore:
    """Create an empty in-process document store."""
    return MemoryDocumentStore()


@pytest.fixture
def inventory_service(store: MemoryDocumentStore) -> InventoryService:
    return InventoryService(store)


@pytest.fixture
def reservation_service(store: MemoryDocumentStore) -> ReservationService:
    return ReservationService(store)


@pytest_asyncio.fixture
async def live_sync(store: MemoryDocumentStore) -> AsyncGenerator[LiveSync, None]:
    """Create a running sync adapter over the test store."""
    sync = LiveSync(store)
    await sync.start()
    yield sync
    await sync.stop()


@pytest_asyncio.fixture
async def test_client(
    store: MemoryDocumentStore,
    live_sync: LiveSync,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test HTTP client bound to the test store."""
    app.state.store = store
    app.state.sync = live_sync
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# Sample data fixtures


@pytest.fixture
def make_item() -> Callable[..., InventoryItem]:
    """Build inventory items without touching a store."""

    def _make(
        item_id: str = "chairs",
        name: str | None = None,
        quantity: int = 50,
        category: str = "Chairs",
    ) -> InventoryItem:
        return InventoryItem(
            id=item_id,
            name=name or item_id.title(),
            category=category,
            quantity=quantity,
        )

    return _make


@pytest.fixture
def make_reservation() -> Callable[..., Reservation]:
    """Build reservations without touching a store."""

    def _make(
        reservation_id: str = "r1",
        date_from: str = "2025-06-01",
        date_to: str | None = None,
        items: dict[str, int] | None = None,
        total_price: str = "1000",
        status: ReservationStatus = ReservationStatus.ACTIVE,
        client_name: str = "Test Client",
        location: str = "Test Location",
    ) -> Reservation:
        lines = items if items is not None else {"chairs": 2}
        return Reservation(
            id=reservation_id,
            client_name=client_name,
            location=location,
            date_from=date.fromisoformat(date_from),
            date_to=date.fromisoformat(date_to or date_from),
            time="10:00",
            items=[
                ReservationLine(item_id=item_id, item_name=item_id, quantity=quantity)
                for item_id, quantity in lines.items()
            ],
            total_price=Decimal(total_price),
            status=status,
        )

    return _make


@pytest.fixture
def booking() -> Callable[..., ReservationInput]:
    """Build reservation form input."""

    def _make(
        items: dict[str, int],
        date_from: str = "2025-06-01",
        date_to: str = "2025-06-03",
        total_price: str = "1000",
    ) -> ReservationInput:
        return ReservationInput(
            client_name="Test Client",
            location="Test Location",
            date_from=date.fromisoformat(date_from),
            date_to=date.fromisoformat(date_to),
            time="10:00",
            items=[
                ReservationLineInput(item_id=item_id, quantity=quantity)
                for item_id, quantity in items.items()
            ],
            total_price=Decimal(total_price),
        )

    return _make


@pytest_asyncio.fixture
async def stocked_item(inventory_service: InventoryService) -> InventoryItem:
    """Create a warehouse item with five units."""
    return await inventory_service.add_item(
        InventoryItemInput(name="Party tent", category="Tents", quantity=5)
    )
