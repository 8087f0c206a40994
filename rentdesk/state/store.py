"""Live document store holding the inventory and reservation collections.

Each collection is a Redis hash of JSON documents keyed by id. Every write
publishes on the collection's change channel; subscribers re-read the whole
collection and receive the full record list.
"""

import asyncio
import json
import uuid
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager, suppress
from typing import Any, AsyncIterator, Awaitable, Callable

import redis.asyncio as redis
from redis.exceptions import RedisError

from rentdesk.config import get_settings
from rentdesk.errors import DocumentNotFoundError, StoreError
from rentdesk.utils.logging import get_logger

logger = get_logger(__name__)

Document = dict[str, Any]
OnChange = Callable[[list[Document]], Awaitable[None]]
Unsubscribe = Callable[[], Awaitable[None]]


class DocumentStore(ABC):
    """Collaborator contract for the backing document database."""

    async def connect(self) -> None:
        """Open any underlying connection."""

    async def disconnect(self) -> None:
        """Release any underlying connection."""

    @abstractmethod
    async def create(self, collection: str, fields: Document) -> str:
        """Insert a document and return its store-assigned id."""

    @abstractmethod
    async def update(self, collection: str, document_id: str, fields: Document) -> None:
        """Merge fields into an existing document."""

    @abstractmethod
    async def delete(self, collection: str, document_id: str) -> None:
        """Remove a document; removing a missing id does nothing."""

    @abstractmethod
    async def get(self, collection: str, document_id: str) -> Document | None:
        """Fetch one document with its ``id``, or None."""

    @abstractmethod
    async def list(self, collection: str) -> list[Document]:
        """Fetch every document of a collection."""

    @abstractmethod
    async def subscribe(self, collection: str, on_change: OnChange) -> Unsubscribe:
        """Deliver the full record set now and after every change."""


class RedisDocumentStore(DocumentStore):
    """Document store backed by Redis hashes and pub/sub."""

    def __init__(self, redis_url: str | None = None, prefix: str | None = None) -> None:
        settings = get_settings()
        self.redis_client: redis.Redis | None = None
        self.redis_url = redis_url or settings.redis_url
        self.prefix = prefix or settings.store_prefix

    def _key(self, collection: str) -> str:
        return f"{self.prefix}:{collection}"

    def _channel(self, collection: str) -> str:
        return f"{self.prefix}:{collection}:changes"

    @asynccontextmanager
    async def _client(self, operation: str, collection: str) -> AsyncIterator[redis.Redis]:
        """Yield a connected client, translating Redis failures to StoreError."""
        try:
            if not self.redis_client:
                await self.connect()
            yield self.redis_client
        except RedisError as e:
            logger.error(
                "store_operation_failed",
                operation=operation,
                collection=collection,
                error=str(e),
            )
            raise StoreError(f"{operation} on {collection} failed: {e}") from e

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self.redis_client is None:
            self.redis_client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            logger.info("redis_connected", url=self.redis_url)

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis_client:
            await self.redis_client.aclose()
            self.redis_client = None
            logger.info("redis_disconnected")

    async def create(self, collection: str, fields: Document) -> str:
        document_id = uuid.uuid4().hex
        async with self._client("create", collection) as client:
            await client.hset(self._key(collection), document_id, json.dumps(fields))
            await client.publish(self._channel(collection), document_id)

        logger.debug("document_created", collection=collection, document_id=document_id)
        return document_id

    async def update(self, collection: str, document_id: str, fields: Document) -> None:
        async with self._client("update", collection) as client:
            raw = await client.hget(self._key(collection), document_id)
            if raw is None:
                raise DocumentNotFoundError(collection, document_id)

            document = json.loads(raw)
            document.update(fields)
            await client.hset(self._key(collection), document_id, json.dumps(document))
            await client.publish(self._channel(collection), document_id)

        logger.debug("document_updated", collection=collection, document_id=document_id)

    async def delete(self, collection: str, document_id: str) -> None:
        async with self._client("delete", collection) as client:
            removed = await client.hdel(self._key(collection), document_id)
            if removed:
                await client.publish(self._channel(collection), document_id)

        logger.debug("document_deleted", collection=collection, document_id=document_id)

    async def get(self, collection: str, document_id: str) -> Document | None:
        async with self._client("get", collection) as client:
            raw = await client.hget(self._key(collection), document_id)

        if raw is None:
            return None
        return {"id": document_id, **json.loads(raw)}

    async def list(self, collection: str) -> list[Document]:
        async with self._client("list", collection) as client:
            data = await client.hgetall(self._key(collection))

        return [{"id": document_id, **json.loads(raw)} for document_id, raw in data.items()]

    async def subscribe(self, collection: str, on_change: OnChange) -> Unsubscribe:
        channel = self._channel(collection)
        async with self._client("subscribe", collection) as client:
            pubsub = client.pubsub()
            await pubsub.subscribe(channel)

        await on_change(await self.list(collection))
        task = asyncio.create_task(self._listen(pubsub, collection, on_change))
        logger.info("collection_subscribed", collection=collection, channel=channel)

        async def unsubscribe() -> None:
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task
            await pubsub.unsubscribe(channel)
            await pubsub.aclose()
            logger.info("collection_unsubscribed", collection=collection)

        return unsubscribe

    async def _listen(
        self,
        pubsub: redis.client.PubSub,
        collection: str,
        on_change: OnChange,
    ) -> None:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            try:
                await on_change(await self.list(collection))
            except Exception as e:
                logger.error(
                    "subscription_callback_failed",
                    collection=collection,
                    error=str(e),
                )


class MemoryDocumentStore(DocumentStore):
    """Process-local document store for development and tests."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}
        self._subscribers: dict[str, list[OnChange]] = {}

    def _documents(self, collection: str) -> dict[str, Document]:
        return self._collections.setdefault(collection, {})

    async def _notify(self, collection: str) -> None:
        records = await self.list(collection)
        for callback in list(self._subscribers.get(collection, [])):
            await callback(records)

    async def create(self, collection: str, fields: Document) -> str:
        document_id = uuid.uuid4().hex
        self._documents(collection)[document_id] = json.loads(json.dumps(fields))
        await self._notify(collection)
        return document_id

    async def update(self, collection: str, document_id: str, fields: Document) -> None:
        documents = self._documents(collection)
        if document_id not in documents:
            raise DocumentNotFoundError(collection, document_id)
        documents[document_id].update(json.loads(json.dumps(fields)))
        await self._notify(collection)

    async def delete(self, collection: str, document_id: str) -> None:
        if self._documents(collection).pop(document_id, None) is not None:
            await self._notify(collection)

    async def get(self, collection: str, document_id: str) -> Document | None:
        document = self._documents(collection).get(document_id)
        if document is None:
            return None
        return {"id": document_id, **json.loads(json.dumps(document))}

    async def list(self, collection: str) -> list[Document]:
        return [
            {"id": document_id, **json.loads(json.dumps(document))}
            for document_id, document in self._documents(collection).items()
        ]

    async def subscribe(self, collection: str, on_change: OnChange) -> Unsubscribe:
        subscribers = self._subscribers.setdefault(collection, [])
        subscribers.append(on_change)
        await on_change(await self.list(collection))

        async def unsubscribe() -> None:
            if on_change in subscribers:
                subscribers.remove(on_change)

        return unsubscribe


def create_document_store() -> DocumentStore:
    """Build the store selected by ``STORE_BACKEND``."""
    settings = get_settings()
    if settings.store_backend == "memory":
        return MemoryDocumentStore()
    return RedisDocumentStore()


# Global document store instance
_document_store: DocumentStore | None = None


async def get_document_store() -> DocumentStore:
    """Get the global document store instance."""
    global _document_store
    if _document_store is None:
        _document_store = create_document_store()
        await _document_store.connect()
    return _document_store


async def close_document_store() -> None:
    """Disconnect and forget the global document store."""
    global _document_store
    if _document_store is not None:
        await _document_store.disconnect()
        _document_store = None
