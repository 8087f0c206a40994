"""Services issuing writes to the document store."""

from rentdesk.services.inventory import InventoryService
from rentdesk.services.reservations import ReservationService

__all__ = ["InventoryService", "ReservationService"]
