"""WebSocket push of live collection snapshots."""

import json
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ValidationError

from rentdesk.core.snapshot import DashboardState
from rentdesk.state.sync import LiveSync
from rentdesk.utils.logging import get_logger

logger = get_logger(__name__)


class WebSocketMessage(BaseModel):
    """Client message format."""

    type: str  # "ping", "refresh"
    metadata: dict[str, Any] = {}


def snapshot_message(state: DashboardState) -> dict[str, Any]:
    """Full contents of both collections, as the store documents look."""
    return {
        "type": "snapshot",
        "inventory": [item.model_dump(mode="json", by_alias=True) for item in state.inventory],
        "reservations": [
            reservation.model_dump(mode="json", by_alias=True)
            for reservation in state.reservations
        ],
    }


class ConnectionManager:
    """Manages WebSocket connections."""

    def __init__(self) -> None:
        self.active_connections: dict[str, WebSocket] = {}

    async def connect(self, client_id: str, websocket: WebSocket) -> None:
        """Accept and register a WebSocket connection."""
        await websocket.accept()
        self.active_connections[client_id] = websocket
        logger.info("websocket_connected", client_id=client_id)

    def disconnect(self, client_id: str) -> None:
        """Remove a WebSocket connection."""
        if client_id in self.active_connections:
            del self.active_connections[client_id]
            logger.info("websocket_disconnected", client_id=client_id)

    async def broadcast_state(self, state: DashboardState) -> None:
        """Send the new snapshot to every connected client."""
        message = snapshot_message(state)
        for client_id, websocket in list(self.active_connections.items()):
            try:
                await websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError) as e:
                logger.warning("websocket_send_failed", client_id=client_id, error=str(e))
                self.disconnect(client_id)


# Global connection manager
manager = ConnectionManager()


async def handle_sync_connection(websocket: WebSocket, sync: LiveSync) -> None:
    """
    Stream snapshots to one client until it disconnects.

    Args:
        websocket: WebSocket connection
        sync: Adapter holding the current state
    """
    if websocket.client:
        client_id = f"{websocket.client.host}:{websocket.client.port}"
    else:
        client_id = str(id(websocket))

    await manager.connect(client_id, websocket)
    await websocket.send_json(snapshot_message(sync.state))

    try:
        while True:
            data = await websocket.receive_text()

            try:
                ws_message = WebSocketMessage(**json.loads(data))
            except (json.JSONDecodeError, ValidationError, TypeError) as e:
                await websocket.send_json(
                    {
                        "type": "error",
                        "message": "Invalid message format",
                        "details": str(e),
                    }
                )
                continue

            if ws_message.type == "ping":
                await websocket.send_json({"type": "pong"})
            elif ws_message.type == "refresh":
                await websocket.send_json(snapshot_message(sync.state))

    except WebSocketDisconnect:
        manager.disconnect(client_id)
        logger.info("websocket_client_disconnected", client_id=client_id)
