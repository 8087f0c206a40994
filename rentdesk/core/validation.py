"""Form validation returning per-field error messages.

An empty mapping means the input is valid. Keys are the document field names
(``clientName``, ``totalPrice``...) and ``item_{i}_id`` /
``item_{i}_quantity`` for booking lines.
"""

from typing import Iterable, Mapping

from rentdesk.models.inventory import InventoryItem, InventoryItemInput
from rentdesk.models.reservation import ReservationInput


def validate_inventory_item(
    payload: InventoryItemInput,
    existing: Iterable[InventoryItem],
    editing_id: str | None = None,
) -> dict[str, str]:
    """Validate an inventory item against the rest of the warehouse."""
    errors: dict[str, str] = {}

    name = payload.name.strip()
    if not name:
        errors["name"] = "Item name is required"
    else:
        lowered = name.lower()
        duplicate = any(
            item.name.lower() == lowered and item.id != editing_id for item in existing
        )
        if duplicate:
            errors["name"] = "An item with this name already exists"

    if not payload.category.strip():
        errors["category"] = "Category is required"

    if payload.quantity < 0:
        errors["quantity"] = "Quantity cannot be negative"

    return errors


def validate_reservation(payload: ReservationInput) -> dict[str, str]:
    """Validate the fields of a reservation form."""
    errors: dict[str, str] = {}

    if not payload.client_name.strip():
        errors["clientName"] = "Client name is required"

    if not payload.location.strip():
        errors["location"] = "Location is required"

    if payload.date_from is None:
        errors["dateFrom"] = "Start date is required"

    if payload.date_to is None:
        errors["dateTo"] = "End date is required"
    elif payload.date_from is not None and payload.date_to < payload.date_from:
        errors["dateTo"] = "End date cannot be before start date"

    if not payload.time.strip():
        errors["time"] = "Time is required"

    if payload.total_price <= 0:
        errors["totalPrice"] = "Price must be greater than 0"

    if not payload.items:
        errors["items"] = "Select at least one piece of equipment"

    for index, line in enumerate(payload.items):
        if not line.item_id:
            errors[f"item_{index}_id"] = "Select equipment"
        if line.quantity <= 0:
            errors[f"item_{index}_quantity"] = "Quantity must be greater than 0"

    return errors


def check_stock(
    payload: ReservationInput,
    on_hand: Mapping[str, int],
    already_claimed: Mapping[str, int] | None = None,
) -> dict[str, str]:
    """Reject lines asking for more than the warehouse can hand out.

    Args:
        payload: Validated reservation input
        on_hand: Current quantity per inventory item id
        already_claimed: Quantities the reservation being edited already
            holds, which are returned before the new lines are applied.
            Items held here but gone from ``on_hand`` were deleted after
            booking and are not checked.

    Returns:
        Errors keyed by ``item_{i}_id`` for unknown items and
        ``item_{i}_quantity`` for lines asking too much
    """
    claimed = already_claimed or {}
    errors: dict[str, str] = {}
    requested: dict[str, int] = {}

    for index, line in enumerate(payload.items):
        if line.item_id not in on_hand:
            if line.item_id not in claimed:
                errors[f"item_{index}_id"] = "Select equipment"
            continue
        requested[line.item_id] = requested.get(line.item_id, 0) + line.quantity
        available = on_hand[line.item_id] + claimed.get(line.item_id, 0)
        if requested[line.item_id] > available:
            errors[f"item_{index}_quantity"] = f"Only {available} in stock"

    return errors
