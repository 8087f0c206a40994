"""Tracing of the store writes that make up one mutation.

Reservation mutations issue several independent writes (the reservation
document plus one per inventory line). The tracer records them in order so
a partially applied mutation can be reconstructed from the logs.
"""

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Generator

from rentdesk.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class TraceEvent:
    """Individual store write within a mutation."""

    timestamp: datetime
    event_type: str
    collection: str
    document_id: str | None
    duration_ms: float | None = None
    success: bool = True
    metadata: dict[str, Any] = field(default_factory=dict)


class MutationTracer:
    """Traces the writes issued by one reservation or inventory mutation."""

    def __init__(self, operation: str, subject_id: str | None = None):
        self.operation = operation
        self.subject_id = subject_id
        self.events: list[TraceEvent] = []

    def add_event(
        self,
        event_type: str,
        collection: str,
        document_id: str | None = None,
        duration_ms: float | None = None,
        success: bool = True,
        **metadata: Any,
    ) -> None:
        """Add a trace event."""
        event = TraceEvent(
            timestamp=datetime.now(timezone.utc),
            event_type=event_type,
            collection=collection,
            document_id=document_id,
            duration_ms=duration_ms,
            success=success,
            metadata=metadata,
        )
        self.events.append(event)

        logger.info(
            "trace_event",
            operation=self.operation,
            subject_id=self.subject_id,
            event_type=event_type,
            collection=collection,
            document_id=document_id,
            duration_ms=duration_ms,
            success=success,
            **metadata,
        )

    @contextmanager
    def trace_write(
        self,
        event_type: str,
        collection: str,
        document_id: str | None = None,
        **metadata: Any,
    ) -> Generator[None, None, None]:
        """Context manager timing one store write; failures are recorded and re-raised."""
        start = time.time()
        success = False
        try:
            yield
            success = True
        finally:
            duration_ms = (time.time() - start) * 1000
            self.add_event(
                event_type,
                collection,
                document_id,
                duration_ms=duration_ms,
                success=success,
                **metadata,
            )

    @property
    def completed_writes(self) -> int:
        return sum(1 for event in self.events if event.success)
