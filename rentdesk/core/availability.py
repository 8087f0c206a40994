"""Reservation overlap and equipment availability.

Everything here is a pure function of its arguments. Finished reservations
never block equipment.
"""

from typing import Iterable, Sequence, Union

from rentdesk.models.dates import DateWindow, DayLike
from rentdesk.models.inventory import InventoryItem
from rentdesk.models.reservation import Reservation

WindowLike = Union[DateWindow, DayLike, tuple]


def to_window(window: WindowLike) -> DateWindow:
    """Accept a window, a single day, or a ``(from, to)`` pair."""
    if isinstance(window, DateWindow):
        return window
    if isinstance(window, tuple):
        start, end = window
        return DateWindow.of(start, end)
    return DateWindow.of(window)


def is_reserved(
    item_id: str,
    window: WindowLike,
    reservations: Iterable[Reservation],
    ignore_reservation_id: str | None = None,
) -> bool:
    """Check if an unfinished reservation claims the item during the window.

    Args:
        item_id: Inventory item identifier
        window: Candidate day or inclusive date range
        reservations: All known reservations
        ignore_reservation_id: Reservation to leave out, typically the one
            being edited

    Returns:
        True if any active reservation containing the item intersects the window
    """
    candidate = to_window(window)
    for reservation in reservations:
        if reservation.is_finished or reservation.id == ignore_reservation_id:
            continue
        if reservation.claims(item_id) and reservation.window.overlaps(candidate):
            return True
    return False


def available_items(
    window: WindowLike,
    reservations: Sequence[Reservation],
    inventory: Iterable[InventoryItem],
    exclude_item_ids: Iterable[str] = (),
    current_item_id: str | None = None,
    ignore_reservation_id: str | None = None,
) -> list[InventoryItem]:
    """Inventory items that can be put on a booking line for the window.

    ``exclude_item_ids`` holds items already chosen on other lines of the same
    booking; ``current_item_id`` is the line being edited in place and stays
    selectable.
    """
    candidate = to_window(window)
    excluded = {item_id for item_id in exclude_item_ids if item_id != current_item_id}

    return [
        item
        for item in inventory
        if item.id not in excluded
        and item.is_available
        and not is_reserved(item.id, candidate, reservations, ignore_reservation_id)
    ]
