"""Dashboard and warehouse figures derived from the two collections."""

import datetime
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from rentdesk.models.dates import DateWindow, DayLike, as_day
from rentdesk.models.inventory import InventoryItem
from rentdesk.models.reservation import Reservation

CALENDAR_CELLS = 42
SUGGESTED_CATEGORIES = ("Chairs", "Tables", "Tents", "Pagodas", "Other")

StockLevel = Literal["low", "medium", "good"]


class CalendarDay(BaseModel):
    """One cell of the month grid."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: datetime.date
    day: int
    has_reservation: bool
    is_current_month: bool
    is_today: bool


def month_reservations(
    reservations: Iterable[Reservation], year: int, month: int
) -> list[Reservation]:
    """Reservations with at least one day inside the month."""
    month_window = DateWindow.month(year, month)
    return [r for r in reservations if r.window.overlaps(month_window)]


def monthly_reservation_count(
    reservations: Iterable[Reservation], year: int, month: int
) -> int:
    return len(month_reservations(reservations, year, month))


def monthly_revenue(
    reservations: Iterable[Reservation], year: int, month: int
) -> Decimal:
    """Revenue attributed to the month a reservation starts in, any status."""
    month_window = DateWindow.month(year, month)
    return sum(
        (r.total_price for r in reservations if month_window.contains(r.date_from)),
        Decimal("0"),
    )


def upcoming_reservations(
    reservations: Iterable[Reservation], today: DayLike, days: int = 7
) -> list[Reservation]:
    """Reservations touching the next ``days`` days, earliest start first."""
    start = as_day(today)
    horizon = DateWindow(start=start, end=start + timedelta(days=days))
    upcoming = [r for r in reservations if r.window.overlaps(horizon)]
    return sorted(upcoming, key=lambda r: r.date_from)


def low_stock_items(
    inventory: Iterable[InventoryItem], threshold: int = 10
) -> list[InventoryItem]:
    return [item for item in inventory if item.is_low_stock(threshold)]


def calendar_days(
    reservations: Iterable[Reservation],
    year: int,
    month: int,
    today: DayLike,
) -> list[CalendarDay]:
    """The 42-cell grid for a month, starting on the Sunday on/before the 1st."""
    first = date(year, month, 1)
    # weekday(): Monday == 0, so Sunday-based offset is shifted by one
    grid_start = first - timedelta(days=(first.weekday() + 1) % 7)
    in_month = month_reservations(reservations, year, month)
    today_day = as_day(today)

    cells = []
    for offset in range(CALENDAR_CELLS):
        current = grid_start + timedelta(days=offset)
        cells.append(
            CalendarDay(
                date=current,
                day=current.day,
                has_reservation=any(r.window.contains(current) for r in in_month),
                is_current_month=current.month == month,
                is_today=current == today_day,
            )
        )
    return cells


def shift_month(year: int, month: int, step: int) -> tuple[int, int]:
    """Move the displayed month forwards or backwards by ``step`` months."""
    index = year * 12 + (month - 1) + step
    return index // 12, index % 12 + 1


def reservations_on(reservations: Iterable[Reservation], day: DayLike) -> list[Reservation]:
    """Reservations covering the selected calendar day."""
    selected = as_day(day)
    return [r for r in reservations if r.window.contains(selected)]


# Warehouse view


def total_stock(inventory: Iterable[InventoryItem]) -> int:
    return sum(item.quantity for item in inventory)


def categories(inventory: Iterable[InventoryItem]) -> list[str]:
    """Distinct categories in first-seen order."""
    return list(dict.fromkeys(item.category for item in inventory))


def category_suggestions(inventory: Iterable[InventoryItem]) -> list[str]:
    """Suggested categories followed by any others already in use."""
    return list(dict.fromkeys([*SUGGESTED_CATEGORIES, *categories(inventory)]))


def filter_inventory(
    inventory: Iterable[InventoryItem],
    search: str = "",
    category: str = "",
) -> list[InventoryItem]:
    """Items whose name contains ``search`` (case-insensitive) in ``category``."""
    needle = search.lower()
    return [
        item
        for item in inventory
        if needle in item.name.lower() and (not category or item.category == category)
    ]


def search_reservations(
    reservations: Iterable[Reservation], term: str = ""
) -> list[Reservation]:
    """Match on client name or location, case-insensitive; newest start first."""
    needle = term.lower()
    matches = [
        r
        for r in reservations
        if needle in r.client_name.lower() or needle in r.location.lower()
    ]
    return sorted(matches, key=lambda r: r.date_from, reverse=True)


def item_reservation_windows(
    item_id: str, reservations: Iterable[Reservation]
) -> list[DateWindow]:
    """Date windows of unfinished reservations holding the item."""
    return [r.window for r in reservations if not r.is_finished and r.claims(item_id)]


def current_reservation_end(
    item_id: str, reservations: Iterable[Reservation], today: DayLike
) -> date | None:
    """Earliest end date among reservations holding the item today."""
    current = as_day(today)
    ends = [
        r.date_to
        for r in reservations
        if r.claims(item_id) and r.window.contains(current)
    ]
    return min(ends) if ends else None


def stock_level(quantity: int) -> StockLevel:
    if quantity < 10:
        return "low"
    if quantity < 25:
        return "medium"
    return "good"
