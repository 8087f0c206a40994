"""HTTP routes for the warehouse, reservations and dashboard."""

from contextlib import contextmanager
from datetime import date
from typing import Generator

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rentdesk.config import get_settings
from rentdesk.core import aggregates
from rentdesk.core.availability import available_items
from rentdesk.core.snapshot import DashboardState
from rentdesk.errors import (
    InventoryItemNotFoundError,
    ReservationNotFoundError,
    StoreError,
    ValidationFailed,
)
from rentdesk.models.dates import DateWindow
from rentdesk.models.inventory import InventoryItem, InventoryItemInput, QuantityAdjustment
from rentdesk.models.reservation import Money, Reservation, ReservationInput
from rentdesk.services.inventory import InventoryService
from rentdesk.services.reservations import ReservationService
from rentdesk.state.store import DocumentStore
from rentdesk.state.sync import LiveSync
from rentdesk.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


# Response Models


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemReservationStatus(ApiModel):
    """Booking windows of one warehouse item."""

    item: InventoryItem
    stock_level: str
    reserved_until: date | None
    windows: list[DateWindow]


class DashboardResponse(ApiModel):
    """Figures for the dashboard of one calendar month."""

    year: int
    month: int
    reservation_count: int
    revenue: Money
    total_stock: int
    upcoming: list[Reservation]
    low_stock: list[InventoryItem]
    calendar: list[aggregates.CalendarDay]
    selected_day: date | None = None
    selected_day_reservations: list[Reservation] = []


# Dependencies


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_sync(request: Request) -> LiveSync:
    return request.app.state.sync


def get_view_state(sync: LiveSync = Depends(get_sync)) -> DashboardState:
    """Latest snapshot of both collections."""
    return sync.state


def get_inventory_service(store: DocumentStore = Depends(get_store)) -> InventoryService:
    return InventoryService(store)


def get_reservation_service(
    store: DocumentStore = Depends(get_store),
) -> ReservationService:
    return ReservationService(store)


@contextmanager
def service_errors() -> Generator[None, None, None]:
    """Translate service exceptions into HTTP errors."""
    try:
        yield
    except ValidationFailed as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": e.errors},
        ) from e
    except (InventoryItemNotFoundError, ReservationNotFoundError) as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except StoreError as e:
        logger.error("store_request_failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="The data store is unavailable. Please try again.",
        ) from e


# Inventory


@router.get("/inventory", response_model=list[InventoryItem])
async def list_inventory(
    search: str = "",
    category: str = "",
    state: DashboardState = Depends(get_view_state),
) -> list[InventoryItem]:
    """List warehouse items, optionally filtered by name and category."""
    return aggregates.filter_inventory(state.inventory, search, category)


@router.get("/inventory/categories", response_model=list[str])
async def list_categories(state: DashboardState = Depends(get_view_state)) -> list[str]:
    return aggregates.category_suggestions(state.inventory)


@router.post(
    "/inventory",
    response_model=InventoryItem,
    status_code=status.HTTP_201_CREATED,
)
async def add_inventory_item(
    payload: InventoryItemInput,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItem:
    with service_errors():
        return await service.add_item(payload)


@router.put("/inventory/{item_id}", response_model=InventoryItem)
async def update_inventory_item(
    item_id: str,
    payload: InventoryItemInput,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItem:
    with service_errors():
        return await service.update_item(item_id, payload)


@router.delete("/inventory/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inventory_item(
    item_id: str,
    service: InventoryService = Depends(get_inventory_service),
) -> None:
    with service_errors():
        await service.delete_item(item_id)


@router.post("/inventory/{item_id}/adjust", response_model=InventoryItem)
async def adjust_inventory_item(
    item_id: str,
    adjustment: QuantityAdjustment,
    service: InventoryService = Depends(get_inventory_service),
) -> InventoryItem:
    """Apply a manual stock correction such as +5 or -1."""
    with service_errors():
        return await service.adjust_quantity(item_id, adjustment.delta)


@router.get("/inventory/{item_id}/reservations", response_model=ItemReservationStatus)
async def inventory_item_reservations(
    item_id: str,
    state: DashboardState = Depends(get_view_state),
) -> ItemReservationStatus:
    """Unfinished booking windows of one item."""
    item = state.inventory_by_id().get(item_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Inventory item not found",
        )

    return ItemReservationStatus(
        item=item,
        stock_level=aggregates.stock_level(item.quantity),
        reserved_until=aggregates.current_reservation_end(
            item_id, state.reservations, date.today()
        ),
        windows=aggregates.item_reservation_windows(item_id, state.reservations),
    )


# Reservations


@router.get("/reservations", response_model=list[Reservation])
async def list_reservations(
    search: str = "",
    state: DashboardState = Depends(get_view_state),
) -> list[Reservation]:
    """List reservations matching a client name or location."""
    return aggregates.search_reservations(state.reservations, search)


@router.post(
    "/reservations",
    response_model=Reservation,
    status_code=status.HTTP_201_CREATED,
)
async def create_reservation(
    payload: ReservationInput,
    service: ReservationService = Depends(get_reservation_service),
) -> Reservation:
    with service_errors():
        return await service.create(payload)


@router.put("/reservations/{reservation_id}", response_model=Reservation)
async def edit_reservation(
    reservation_id: str,
    payload: ReservationInput,
    service: ReservationService = Depends(get_reservation_service),
) -> Reservation:
    with service_errors():
        return await service.edit(reservation_id, payload)


@router.post("/reservations/{reservation_id}/finish", response_model=Reservation)
async def finish_reservation(
    reservation_id: str,
    service: ReservationService = Depends(get_reservation_service),
) -> Reservation:
    with service_errors():
        return await service.finish(reservation_id)


@router.delete("/reservations/{reservation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reservation(
    reservation_id: str,
    service: ReservationService = Depends(get_reservation_service),
) -> None:
    """Delete a reservation and return its equipment to stock."""
    with service_errors():
        await service.delete(reservation_id)


# Availability and dashboard


@router.get("/availability", response_model=list[InventoryItem])
async def availability(
    date_from: date,
    date_to: date | None = None,
    exclude: list[str] = Query(default=[]),
    current_item_id: str | None = None,
    reservation_id: str | None = None,
    state: DashboardState = Depends(get_view_state),
) -> list[InventoryItem]:
    """
    Items that can be booked for the given dates.

    ``exclude`` lists items already on other lines of the booking being
    filled in, ``current_item_id`` the line being changed, and
    ``reservation_id`` the reservation being edited.
    """
    end = date_to or date_from
    if end < date_from:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"errors": {"dateTo": "End date cannot be before start date"}},
        )

    return available_items(
        DateWindow(start=date_from, end=end),
        state.reservations,
        state.inventory,
        exclude_item_ids=exclude,
        current_item_id=current_item_id,
        ignore_reservation_id=reservation_id,
    )


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    year: int | None = Query(default=None, ge=1),
    month: int | None = Query(default=None, ge=1, le=12),
    day: date | None = None,
    step: int = 0,
    state: DashboardState = Depends(get_view_state),
) -> DashboardResponse:
    """Monthly figures, upcoming bookings, low stock and the calendar grid.

    ``step`` moves the displayed month backwards or forwards from ``year``/``month``.
    """
    settings = get_settings()
    today = date.today()
    year, month = aggregates.shift_month(
        year or today.year, month or today.month, step
    )

    return DashboardResponse(
        year=year,
        month=month,
        reservation_count=aggregates.monthly_reservation_count(
            state.reservations, year, month
        ),
        revenue=aggregates.monthly_revenue(state.reservations, year, month),
        total_stock=aggregates.total_stock(state.inventory),
        upcoming=aggregates.upcoming_reservations(
            state.reservations, today, settings.upcoming_days
        ),
        low_stock=aggregates.low_stock_items(
            state.inventory, settings.low_stock_threshold
        ),
        calendar=aggregates.calendar_days(state.reservations, year, month, today),
        selected_day=day,
        selected_day_reservations=(
            aggregates.reservations_on(state.reservations, day) if day else []
        ),
    )
