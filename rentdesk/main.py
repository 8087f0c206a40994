"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from rentdesk.api.routes import router
from rentdesk.api.websocket import handle_sync_connection, manager
from rentdesk.config import get_settings
from rentdesk.state.store import close_document_store, get_document_store
from rentdesk.state.sync import LiveSync
from rentdesk.utils.logging import get_logger, setup_logging

# Setup logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info("application_starting")

    store = await get_document_store()
    sync = LiveSync(store)
    sync.add_listener(manager.broadcast_state)
    await sync.start()

    app.state.store = store
    app.state.sync = sync
    logger.info("live_sync_initialized")

    yield

    logger.info("application_shutting_down")
    sync.remove_listener(manager.broadcast_state)
    await sync.stop()
    await close_document_store()


app = FastAPI(
    title="Rental Desk",
    description="Rental equipment inventory and reservations",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router, prefix="/api/v1", tags=["api"])


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "service": "rentdesk"}


@app.websocket("/ws/sync")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """Push inventory and reservation snapshots as they change."""
    await handle_sync_connection(websocket, websocket.app.state.sync)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rentdesk.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.environment == "development",
    )
