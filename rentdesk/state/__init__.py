"""Document store access and live synchronisation."""

from rentdesk.state.store import DocumentStore, MemoryDocumentStore, RedisDocumentStore
from rentdesk.state.sync import LiveSync

__all__ = ["DocumentStore", "LiveSync", "MemoryDocumentStore", "RedisDocumentStore"]
