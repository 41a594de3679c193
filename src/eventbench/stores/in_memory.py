"""
In-memory event store implementation.

Every aggregate registered on the test bench gets its own instance of this
store. Events live as long as the store object does.
"""

import asyncio
from collections import defaultdict
from collections.abc import Sequence
from uuid import UUID

from eventbench.events.base import DomainEvent
from eventbench.exceptions import OptimisticLockError
from eventbench.observability import (
    ATTR_AGGREGATE_ID,
    ATTR_AGGREGATE_TYPE,
    ATTR_EVENT_COUNT,
    ATTR_EXPECTED_VERSION,
    ATTR_FROM_VERSION,
    Tracer,
    create_tracer,
)
from eventbench.stores.interface import (
    AppendResult,
    EventStore,
    EventStream,
    ExpectedVersion,
)


class InMemoryEventStore(EventStore):
    """
    In-memory implementation of the event store.

    Features:
        - Optimistic locking with ExpectedVersion support
        - Idempotent appends (an event id already stored is skipped)
        - OpenTelemetry tracing support via Tracer composition

    Example:
        >>> store = InMemoryEventStore()
        >>> result = await store.append_events(
        ...     aggregate_id=order_id,
        ...     aggregate_type="Order",
        ...     events=[OrderCreated(...)],
        ...     expected_version=0,
        ... )
        >>> assert result.success
    """

    def __init__(
        self,
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled

        self._events: dict[UUID, list[DomainEvent]] = defaultdict(list)
        # Insertion ordered: doubles as the first-append order of aggregates
        self._aggregate_types: dict[UUID, str] = {}
        self._event_ids: set[UUID] = set()
        self._global_position: int = 0
        self._lock: asyncio.Lock = asyncio.Lock()

    async def append_events(
        self,
        aggregate_id: UUID,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: int,
    ) -> AppendResult:
        """
        Append events to an aggregate's event stream.

        Supports the ExpectedVersion constants:
        - ExpectedVersion.ANY (-1): Skip version check
        - ExpectedVersion.NO_STREAM (0): Expect stream to not exist
        - ExpectedVersion.STREAM_EXISTS (-2): Expect stream to exist

        Raises:
            OptimisticLockError: If expected version doesn't match current version
        """
        if not events:
            return AppendResult.successful(expected_version)

        with self._tracer.span(
            "eventbench.event_store.append_events",
            {
                ATTR_AGGREGATE_ID: str(aggregate_id),
                ATTR_AGGREGATE_TYPE: aggregate_type,
                ATTR_EVENT_COUNT: len(events),
                ATTR_EXPECTED_VERSION: expected_version,
            },
        ):
            async with self._lock:
                current_version = self._version_of(aggregate_id, aggregate_type)

                if expected_version == ExpectedVersion.ANY:
                    pass
                elif expected_version == ExpectedVersion.STREAM_EXISTS:
                    if current_version == 0:
                        raise OptimisticLockError(aggregate_id, expected_version, current_version)
                elif current_version != expected_version:
                    raise OptimisticLockError(aggregate_id, expected_version, current_version)

                for event in events:
                    if event.event_id in self._event_ids:
                        continue
                    self._global_position += 1
                    self._events[aggregate_id].append(event)
                    self._event_ids.add(event.event_id)

                self._aggregate_types.setdefault(aggregate_id, aggregate_type)

                return AppendResult.successful(
                    self._version_of(aggregate_id, aggregate_type),
                    self._global_position,
                )

    def _version_of(self, aggregate_id: UUID, aggregate_type: str) -> int:
        return sum(1 for e in self._events.get(aggregate_id, []) if e.aggregate_type == aggregate_type)

    async def get_events(
        self,
        aggregate_id: UUID,
        aggregate_type: str | None = None,
        from_version: int = 0,
    ) -> EventStream:
        with self._tracer.span(
            "eventbench.event_store.get_events",
            {
                ATTR_AGGREGATE_ID: str(aggregate_id),
                ATTR_AGGREGATE_TYPE: aggregate_type or "any",
                ATTR_FROM_VERSION: from_version,
            },
        ):
            async with self._lock:
                events = list(self._events.get(aggregate_id, []))
                stored_aggregate_type = self._aggregate_types.get(aggregate_id, "Unknown")

                if aggregate_type:
                    events = [e for e in events if e.aggregate_type == aggregate_type]
                    stored_aggregate_type = aggregate_type

                if from_version > 0:
                    events = events[from_version:]

                return EventStream(
                    aggregate_id=aggregate_id,
                    aggregate_type=stored_aggregate_type,
                    events=events,
                    version=from_version + len(events),
                )

    async def get_events_by_type(self, aggregate_type: str) -> list[DomainEvent]:
        async with self._lock:
            return [
                event
                for aggregate_id in self._aggregate_types
                for event in self._events[aggregate_id]
                if event.aggregate_type == aggregate_type
            ]

    async def get_aggregate_ids(self, aggregate_type: str | None = None) -> list[UUID]:
        async with self._lock:
            return [
                aggregate_id
                for aggregate_id, stored_type in self._aggregate_types.items()
                if aggregate_type is None or stored_type == aggregate_type
            ]

    async def event_exists(self, event_id: UUID) -> bool:
        return event_id in self._event_ids

    async def clear(self) -> None:
        """Remove every stored event."""
        async with self._lock:
            self._events.clear()
            self._aggregate_types.clear()
            self._event_ids.clear()
            self._global_position = 0

    def get_event_count(self) -> int:
        return len(self._event_ids)


__all__ = ["InMemoryEventStore"]
