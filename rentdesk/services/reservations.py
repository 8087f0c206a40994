"""Reservation mutations and their inventory side effects.

Creating a reservation takes its line quantities out of the warehouse and
deleting it puts them back. Finishing only flips the status. Editing applies
the net difference between the old and new lines, which leaves quantities
exactly as a delete followed by a create would.

The reservation write and the inventory writes are separate store calls.
They are issued one after another and are not rolled back if a later one
fails.
"""

from typing import Any, Iterable

from pydantic import ValidationError

from rentdesk.core.snapshot import INVENTORY, RESERVATIONS
from rentdesk.core.validation import check_stock, validate_reservation
from rentdesk.errors import DocumentNotFoundError, ReservationNotFoundError, ValidationFailed
from rentdesk.models.reservation import (
    Reservation,
    ReservationInput,
    ReservationStatus,
    claimed_quantities,
)
from rentdesk.state.documents import parse_reservation, parse_reservation_records
from rentdesk.state.store import DocumentStore
from rentdesk.utils.logging import bind_mutation_context, clear_mutation_context, get_logger
from rentdesk.utils.tracing import MutationTracer

logger = get_logger(__name__)


class ReservationService:
    """Create, edit, finish and delete reservations against the store."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list_reservations(self) -> list[Reservation]:
        return parse_reservation_records(await self.store.list(RESERVATIONS))

    async def get_reservation(self, reservation_id: str) -> Reservation | None:
        """Fetch one reservation; a malformed document counts as missing."""
        document = await self.store.get(RESERVATIONS, reservation_id)
        if document is None:
            return None
        try:
            return parse_reservation(document)
        except ValidationError as e:
            logger.warning(
                "document_skipped",
                collection=RESERVATIONS,
                document_id=reservation_id,
                error=str(e),
            )
            return None

    async def create(self, payload: ReservationInput) -> Reservation:
        """
        Store a new active reservation and take its equipment out of stock.

        Args:
            payload: Submitted reservation fields

        Returns:
            The stored reservation

        Raises:
            ValidationFailed: Invalid fields or not enough stock; nothing written
            StoreError: A store write failed; earlier writes stay applied
        """
        self._raise_if_invalid(validate_reservation(payload))

        inventory = await self._inventory_documents(payload.claimed_quantities())
        on_hand = {item_id: doc["quantity"] for item_id, doc in inventory.items()}
        self._raise_if_invalid(check_stock(payload, on_hand))

        document = self._document_with_names(payload, inventory)
        document["status"] = ReservationStatus.ACTIVE.value

        tracer = MutationTracer("reservation_create")
        bind_mutation_context("reservation_create")
        try:
            with tracer.trace_write("reservation_written", RESERVATIONS):
                reservation_id = await self.store.create(RESERVATIONS, document)
            tracer.subject_id = reservation_id

            for line in payload.items:
                await self._adjust_stock(line.item_id, -line.quantity, tracer)
        finally:
            clear_mutation_context()

        logger.info(
            "reservation_created",
            reservation_id=reservation_id,
            lines=len(payload.items),
            writes=tracer.completed_writes,
        )
        return parse_reservation({"id": reservation_id, **document})

    async def delete(self, reservation_id: str) -> Reservation | None:
        """
        Return a reservation's equipment to stock and remove it.

        Returns:
            The removed reservation, or None if it did not exist
        """
        reservation = await self.get_reservation(reservation_id)
        if reservation is None:
            logger.info("reservation_delete_skipped", reservation_id=reservation_id)
            return None

        tracer = MutationTracer("reservation_delete", reservation_id)
        bind_mutation_context("reservation_delete", reservation_id=reservation_id)
        try:
            for line in reservation.items:
                await self._adjust_stock(line.item_id, line.quantity, tracer)

            with tracer.trace_write("reservation_removed", RESERVATIONS, reservation_id):
                await self.store.delete(RESERVATIONS, reservation_id)
        finally:
            clear_mutation_context("reservation_id")

        logger.info(
            "reservation_deleted",
            reservation_id=reservation_id,
            writes=tracer.completed_writes,
        )
        return reservation

    async def finish(self, reservation_id: str) -> Reservation:
        """Mark a reservation finished. Inventory quantities are not touched."""
        reservation = await self.get_reservation(reservation_id)
        if reservation is None:
            raise ReservationNotFoundError(reservation_id)

        if reservation.is_finished:
            return reservation

        await self.store.update(
            RESERVATIONS,
            reservation_id,
            {"status": ReservationStatus.FINISHED.value},
        )
        logger.info("reservation_finished", reservation_id=reservation_id)
        return reservation.model_copy(update={"status": ReservationStatus.FINISHED})

    async def edit(self, reservation_id: str, payload: ReservationInput) -> Reservation:
        """
        Replace a reservation's fields and rebalance inventory.

        Each touched item changes by (old claim - new claim), so quantities
        end where delete(old) followed by create(new) would leave them.
        The reservation keeps its status.
        """
        current = await self.get_reservation(reservation_id)
        if current is None:
            raise ReservationNotFoundError(reservation_id)

        self._raise_if_invalid(validate_reservation(payload))

        old_claims = claimed_quantities(current)
        new_claims = payload.claimed_quantities()
        inventory = await self._inventory_documents({**old_claims, **new_claims})
        on_hand = {item_id: doc["quantity"] for item_id, doc in inventory.items()}
        self._raise_if_invalid(check_stock(payload, on_hand, old_claims))

        previous_names = {line.item_id: line.item_name for line in current.items}
        document = self._document_with_names(payload, inventory, previous_names)

        tracer = MutationTracer("reservation_edit", reservation_id)
        bind_mutation_context("reservation_edit", reservation_id=reservation_id)
        try:
            with tracer.trace_write("reservation_written", RESERVATIONS, reservation_id):
                await self.store.update(RESERVATIONS, reservation_id, document)

            for item_id in dict.fromkeys([*old_claims, *new_claims]):
                delta = old_claims.get(item_id, 0) - new_claims.get(item_id, 0)
                if delta:
                    await self._adjust_stock(item_id, delta, tracer)
        finally:
            clear_mutation_context("reservation_id")

        logger.info(
            "reservation_edited",
            reservation_id=reservation_id,
            writes=tracer.completed_writes,
        )
        return parse_reservation(
            {"id": reservation_id, "status": current.status.value, **document}
        )

    async def _adjust_stock(
        self, item_id: str, delta: int, tracer: MutationTracer
    ) -> int | None:
        """Apply a quantity change; returns the new quantity or None if the item is gone."""
        document = await self.store.get(INVENTORY, item_id)
        if document is None:
            logger.warning("inventory_item_missing", item_id=item_id, delta=delta)
            return None

        quantity = document["quantity"] + delta
        try:
            with tracer.trace_write("inventory_adjusted", INVENTORY, item_id, delta=delta):
                await self.store.update(INVENTORY, item_id, {"quantity": quantity})
        except DocumentNotFoundError:
            logger.warning("inventory_item_missing", item_id=item_id, delta=delta)
            return None
        return quantity

    async def _inventory_documents(
        self, item_ids: Iterable[str]
    ) -> dict[str, dict[str, Any]]:
        """Current inventory documents for the given ids; missing ids are left out."""
        documents = {}
        for item_id in item_ids:
            document = await self.store.get(INVENTORY, item_id)
            if document is not None:
                documents[item_id] = document
        return documents

    @staticmethod
    def _document_with_names(
        payload: ReservationInput,
        inventory: dict[str, dict[str, Any]],
        previous_names: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Reservation document with each line's item name snapshotted.

        Names already recorded for an item on this reservation are kept;
        otherwise the current inventory name is copied onto the line.
        """
        previous = previous_names or {}
        lines = []
        for line in payload.items:
            name = previous.get(line.item_id) or line.item_name
            if not name and line.item_id in inventory:
                name = inventory[line.item_id].get("name", "")
            lines.append(line.model_copy(update={"item_name": name}))

        return payload.model_copy(update={"items": lines}).to_document()

    @staticmethod
    def _raise_if_invalid(errors: dict[str, str]) -> None:
        if errors:
            logger.info("reservation_rejected", fields=sorted(errors))
            raise ValidationFailed(errors)
