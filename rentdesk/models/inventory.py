"""Warehouse inventory models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class InventoryItem(BaseModel):
    """One equipment type held in the warehouse."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    category: str
    quantity: int = Field(ge=0)

    @property
    def is_available(self) -> bool:
        """Check if any units are on hand."""
        return self.quantity > 0

    def is_low_stock(self, threshold: int = 10) -> bool:
        """Check if the item is below the low stock threshold."""
        return self.quantity < threshold


class InventoryItemInput(BaseModel):
    """Submitted fields for creating or editing an inventory item."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = ""
    category: str = ""
    quantity: int = 0

    def to_document(self) -> dict[str, object]:
        """Store fields with surrounding whitespace trimmed."""
        return {
            "name": self.name.strip(),
            "category": self.category.strip(),
            "quantity": self.quantity,
        }


class QuantityAdjustment(BaseModel):
    """Manual stock correction, e.g. +1, -5."""

    delta: int
