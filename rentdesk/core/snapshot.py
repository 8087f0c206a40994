"""In-memory view state rebuilt from store snapshots."""

from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict

from rentdesk.models.inventory import InventoryItem
from rentdesk.models.reservation import Reservation

INVENTORY = "inventory"
RESERVATIONS = "reservations"

Collection = Literal["inventory", "reservations"]


class DashboardState(BaseModel):
    """Latest known contents of both collections."""

    model_config = ConfigDict(frozen=True)

    inventory: tuple[InventoryItem, ...] = ()
    reservations: tuple[Reservation, ...] = ()

    def inventory_by_id(self) -> dict[str, InventoryItem]:
        return {item.id: item for item in self.inventory}

    def reservation(self, reservation_id: str) -> Reservation | None:
        return next((r for r in self.reservations if r.id == reservation_id), None)


def apply_snapshot(
    state: DashboardState,
    collection: Collection,
    records: Sequence[InventoryItem] | Sequence[Reservation],
) -> DashboardState:
    """Return a new state with one collection replaced wholesale.

    Notifications always carry the full record set, so applying the same
    snapshot twice yields the same state.
    """
    if collection == INVENTORY:
        return state.model_copy(update={"inventory": tuple(records)})
    if collection == RESERVATIONS:
        return state.model_copy(update={"reservations": tuple(records)})
    raise ValueError(f"Unknown collection: {collection}")
