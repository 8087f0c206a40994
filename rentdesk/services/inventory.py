"""Warehouse item management."""

from rentdesk.core.snapshot import INVENTORY
from rentdesk.core.validation import validate_inventory_item
from rentdesk.errors import InventoryItemNotFoundError, ValidationFailed
from rentdesk.models.inventory import InventoryItem, InventoryItemInput
from rentdesk.state.documents import parse_inventory_records
from rentdesk.state.store import DocumentStore
from rentdesk.utils.logging import get_logger

logger = get_logger(__name__)


class InventoryService:
    """Add, edit, adjust and remove warehouse items."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_items(self) -> list[InventoryItem]:
        return parse_inventory_records(await self.store.list(INVENTORY))

    async def get_item(self, item_id: str) -> InventoryItem:
        document = await self.store.get(INVENTORY, item_id)
        if document is None:
            raise InventoryItemNotFoundError(item_id)
        return InventoryItem.model_validate(document)

    async def add_item(self, payload: InventoryItemInput) -> InventoryItem:
        """Create an item; names must be unique regardless of case."""
        errors = validate_inventory_item(payload, await self.list_items())
        if errors:
            raise ValidationFailed(errors)

        document = payload.to_document()
        item_id = await self.store.create(INVENTORY, document)
        logger.info("inventory_item_added", item_id=item_id, name=document["name"])
        return InventoryItem.model_validate({"id": item_id, **document})

    async def update_item(self, item_id: str, payload: InventoryItemInput) -> InventoryItem:
        """Replace an item's name, category and quantity.

        Reservations keep the item name they were booked with.
        """
        await self.get_item(item_id)
        errors = validate_inventory_item(payload, await self.list_items(), editing_id=item_id)
        if errors:
            raise ValidationFailed(errors)

        document = payload.to_document()
        await self.store.update(INVENTORY, item_id, document)
        logger.info("inventory_item_updated", item_id=item_id)
        return InventoryItem.model_validate({"id": item_id, **document})

    async def delete_item(self, item_id: str) -> None:
        """Remove an item. Reservations referencing it are left as they are."""
        await self.store.delete(INVENTORY, item_id)
        logger.info("inventory_item_deleted", item_id=item_id)

    async def adjust_quantity(self, item_id: str, delta: int) -> InventoryItem:
        """Manual stock correction (e.g. -5, -1, +1, +5)."""
        item = await self.get_item(item_id)
        quantity = item.quantity + delta
        if quantity < 0:
            raise ValidationFailed({"quantity": "Quantity cannot be negative"})

        await self.store.update(INVENTORY, item_id, {"quantity": quantity})
        logger.info(
            "inventory_adjusted",
            item_id=item_id,
            delta=delta,
            quantity=quantity,
        )
        return item.model_copy(update={"quantity": quantity})
