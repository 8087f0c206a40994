"""Translation between raw store documents and models."""

from typing import Any, Iterable

from pydantic import ValidationError

from rentdesk.models.inventory import InventoryItem
from rentdesk.models.reservation import Reservation
from rentdesk.utils.logging import get_logger

logger = get_logger(__name__)


def normalize_reservation_document(document: dict[str, Any]) -> dict[str, Any]:
    """Fill ``dateFrom``/``dateTo`` from a legacy single ``date`` field."""
    legacy_date = document.get("date")
    normalized = dict(document)
    normalized["dateFrom"] = document.get("dateFrom") or legacy_date
    normalized["dateTo"] = document.get("dateTo") or legacy_date
    normalized.pop("date", None)
    return normalized


def parse_reservation(document: dict[str, Any]) -> Reservation:
    return Reservation.model_validate(normalize_reservation_document(document))


def parse_inventory_records(records: Iterable[dict[str, Any]]) -> list[InventoryItem]:
    """Parse inventory documents, skipping any that are malformed."""
    items = []
    for record in records:
        try:
            items.append(InventoryItem.model_validate(record))
        except ValidationError as e:
            logger.warning(
                "document_skipped",
                collection="inventory",
                document_id=record.get("id"),
                error=str(e),
            )
    return items


def parse_reservation_records(records: Iterable[dict[str, Any]]) -> list[Reservation]:
    """Parse reservation documents, skipping any that are malformed."""
    reservations = []
    for record in records:
        try:
            reservations.append(parse_reservation(record))
        except ValidationError as e:
            logger.warning(
                "document_skipped",
                collection="reservations",
                document_id=record.get("id"),
                error=str(e),
            )
    return reservations
