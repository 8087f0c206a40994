"""Pure business logic over inventory and reservation snapshots."""

from rentdesk.core.availability import available_items, is_reserved
from rentdesk.core.snapshot import DashboardState, apply_snapshot
from rentdesk.core.validation import validate_inventory_item, validate_reservation

__all__ = [
    "DashboardState",
    "apply_snapshot",
    "available_items",
    "is_reserved",
    "validate_inventory_item",
    "validate_reservation",
]
