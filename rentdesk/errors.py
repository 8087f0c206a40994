"""Exceptions raised by the services and the document store."""


class RentDeskError(Exception):
    """Base class for application errors."""


class ValidationFailed(RentDeskError):
    """Input rejected before any store write was attempted."""

    def __init__(self, errors: dict[str, str]):
        super().__init__(", ".join(f"{key}: {msg}" for key, msg in errors.items()))
        self.errors = errors


class StoreError(RentDeskError):
    """The document store failed to complete a read or write."""


class DocumentNotFoundError(StoreError):
    """An update targeted a document that does not exist."""

    def __init__(self, collection: str, document_id: str):
        super().__init__(f"{collection}/{document_id} not found")
        self.collection = collection
        self.document_id = document_id


class ReservationNotFoundError(RentDeskError):
    """No reservation with the given id."""

    def __init__(self, reservation_id: str):
        super().__init__(f"Reservation {reservation_id} not found")
        self.reservation_id = reservation_id


class InventoryItemNotFoundError(RentDeskError):
    """No inventory item with the given id."""

    def __init__(self, item_id: str):
        super().__init__(f"Inventory item {item_id} not found")
        self.item_id = item_id
