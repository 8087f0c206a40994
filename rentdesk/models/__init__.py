"""Data models for the rental desk."""

from rentdesk.models.dates import DateWindow, as_day
from rentdesk.models.inventory import InventoryItem, InventoryItemInput, QuantityAdjustment
from rentdesk.models.reservation import (
    Reservation,
    ReservationInput,
    ReservationLine,
    ReservationLineInput,
    ReservationStatus,
)

__all__ = [
    # Dates
    "DateWindow",
    "as_day",
    # Inventory
    "InventoryItem",
    "InventoryItemInput",
    "QuantityAdjustment",
    # Reservation
    "Reservation",
    "ReservationInput",
    "ReservationLine",
    "ReservationLineInput",
    "ReservationStatus",
]
