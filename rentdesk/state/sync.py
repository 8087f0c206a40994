"""Subscription adapter keeping a DashboardState current."""

from typing import Any, Awaitable, Callable

from rentdesk.core.snapshot import INVENTORY, RESERVATIONS, DashboardState, apply_snapshot
from rentdesk.state.documents import parse_inventory_records, parse_reservation_records
from rentdesk.state.store import DocumentStore, Unsubscribe
from rentdesk.utils.logging import get_logger

logger = get_logger(__name__)

StateListener = Callable[[DashboardState], Awaitable[None]]


class LiveSync:
    """Owns the store subscriptions for both collections.

    Every notification replaces the affected collection in ``state`` and
    then calls the registered listeners with the new state.
    """

    def __init__(self, store: DocumentStore) -> None:
        self.store = store
        self.state = DashboardState()
        self._unsubscribes: list[Unsubscribe] = []
        self._listeners: list[StateListener] = []

    @property
    def is_running(self) -> bool:
        return bool(self._unsubscribes)

    async def start(self) -> None:
        """Subscribe to both collections."""
        if self.is_running:
            return
        self._unsubscribes.append(await self.store.subscribe(INVENTORY, self._on_inventory))
        self._unsubscribes.append(
            await self.store.subscribe(RESERVATIONS, self._on_reservations)
        )
        logger.info(
            "live_sync_started",
            inventory=len(self.state.inventory),
            reservations=len(self.state.reservations),
        )

    async def stop(self) -> None:
        """Cancel both subscriptions."""
        while self._unsubscribes:
            unsubscribe = self._unsubscribes.pop()
            await unsubscribe()
        logger.info("live_sync_stopped")

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def _on_inventory(self, records: list[dict[str, Any]]) -> None:
        items = parse_inventory_records(records)
        self.state = apply_snapshot(self.state, INVENTORY, items)
        logger.debug("snapshot_applied", collection=INVENTORY, count=len(items))
        await self._publish()

    async def _on_reservations(self, records: list[dict[str, Any]]) -> None:
        reservations = parse_reservation_records(records)
        self.state = apply_snapshot(self.state, RESERVATIONS, reservations)
        logger.debug("snapshot_applied", collection=RESERVATIONS, count=len(reservations))
        await self._publish()

    async def _publish(self) -> None:
        for listener in list(self._listeners):
            await listener(self.state)
