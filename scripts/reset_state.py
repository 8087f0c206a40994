"""Delete both collections from Redis (useful for testing)."""

import asyncio

from rentdesk.core.snapshot import INVENTORY, RESERVATIONS
from rentdesk.state.store import RedisDocumentStore


async def reset_all_state() -> None:
    """Remove every inventory item and reservation."""
    print("\n⚠️  WARNING: This will delete ALL inventory and reservations!")
    response = input("Are you sure? (yes/no): ")

    if response.lower() != "yes":
        print("Cancelled.")
        return

    print("\nResetting state...")

    store = RedisDocumentStore()
    await store.connect()

    try:
        for collection in (RESERVATIONS, INVENTORY):
            documents = await store.list(collection)
            for document in documents:
                await store.delete(collection, document["id"])
            print(f"✓ Removed {len(documents)} documents from {collection}")
    finally:
        await store.disconnect()

    print("✓ All state cleared\n")


if __name__ == "__main__":
    asyncio.run(reset_all_state())
