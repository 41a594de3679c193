"""
Repository pattern for event-sourced aggregates.

Repositories load aggregates by replaying their events and save them by
appending the events they recorded, then publishing those events.
"""

import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar
from uuid import UUID

from eventbench.aggregates.base import AggregateRoot
from eventbench.exceptions import AggregateNotFoundError
from eventbench.observability import Tracer, create_tracer
from eventbench.observability.attributes import (
    ATTR_AGGREGATE_ID,
    ATTR_AGGREGATE_TYPE,
    ATTR_EVENT_COUNT,
    ATTR_VERSION,
)
from eventbench.stores.interface import EventPublisher, EventStore

logger = logging.getLogger(__name__)

TAggregate = TypeVar("TAggregate", bound="AggregateRoot[Any]")

AggregateFactory = Callable[[UUID], TAggregate]


class AggregateRepository(Generic[TAggregate]):
    """
    Repository for event-sourced aggregates.

    Features:
    - Load aggregates by reconstituting state from events
    - Save aggregates by persisting uncommitted events
    - Optional event publishing after successful save
    - Optimistic locking via event store

    Example:
        >>> repo = AggregateRepository(
        ...     event_store=InMemoryEventStore(),
        ...     aggregate_factory=OrderAggregate,
        ...     aggregate_type="Order",
        ...     event_publisher=event_bus,
        ... )
        >>> order = repo.create_new(uuid4())
        >>> order.create(customer_id=customer_id)
        >>> await repo.save(order)
        >>> loaded = await repo.load(order.aggregate_id)
    """

    def __init__(
        self,
        event_store: EventStore,
        aggregate_factory: Callable[[UUID], TAggregate],
        aggregate_type: str,
        event_publisher: EventPublisher | None = None,
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Args:
            event_store: Store holding the aggregate's events
            aggregate_factory: Callable creating an empty aggregate from its id
                               (usually the aggregate class)
            aggregate_type: Type name the events are stored under
            event_publisher: Publishes events after a successful save (optional)
            tracer: Optional custom Tracer instance
            enable_tracing: If True and OpenTelemetry is available, emit traces
        """
        self._event_store = event_store
        self._aggregate_factory = aggregate_factory
        self._aggregate_type = aggregate_type
        self._event_publisher = event_publisher

        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled

    @property
    def aggregate_type(self) -> str:
        return self._aggregate_type

    @property
    def aggregate_factory(self) -> Callable[[UUID], TAggregate]:
        return self._aggregate_factory

    @property
    def event_store(self) -> EventStore:
        return self._event_store

    @property
    def event_publisher(self) -> EventPublisher | None:
        return self._event_publisher

    async def load(self, aggregate_id: UUID) -> TAggregate:
        """
        Load an aggregate from its event history.

        Raises:
            AggregateNotFoundError: If no events exist for the aggregate
        """
        with self._tracer.span(
            "eventbench.repository.load",
            {
                ATTR_AGGREGATE_ID: str(aggregate_id),
                ATTR_AGGREGATE_TYPE: self._aggregate_type,
            },
        ) as span:
            event_stream = await self._event_store.get_events(
                aggregate_id,
                aggregate_type=self._aggregate_type,
            )
            if event_stream.is_empty:
                raise AggregateNotFoundError(aggregate_id, self._aggregate_type)

            aggregate = self._aggregate_factory(aggregate_id)
            aggregate.load_from_history(event_stream.events)

            if span:
                span.set_attribute(ATTR_EVENT_COUNT, len(event_stream.events))
                span.set_attribute(ATTR_VERSION, aggregate.version)

            logger.debug(
                "Loaded %s/%s at version %d",
                self._aggregate_type,
                aggregate_id,
                aggregate.version,
            )
            return aggregate

    async def load_or_create(self, aggregate_id: UUID) -> TAggregate:
        """Load an existing aggregate or create a new, empty one."""
        try:
            return await self.load(aggregate_id)
        except AggregateNotFoundError:
            return self._aggregate_factory(aggregate_id)

    async def save(self, aggregate: TAggregate) -> None:
        """
        Save an aggregate by persisting its uncommitted events.

        After a successful append the events are marked as committed and
        handed to the event publisher, if one is configured. Saving an
        aggregate without uncommitted events is a no-op.

        Raises:
            OptimisticLockError: If there's a version conflict
        """
        uncommitted_events = aggregate.uncommitted_events
        if not uncommitted_events:
            return

        with self._tracer.span(
            "eventbench.repository.save",
            {
                ATTR_AGGREGATE_ID: str(aggregate.aggregate_id),
                ATTR_AGGREGATE_TYPE: self._aggregate_type,
                ATTR_EVENT_COUNT: len(uncommitted_events),
                ATTR_VERSION: aggregate.version,
            },
        ):
            # Version before the uncommitted events were applied
            expected_version = aggregate.version - len(uncommitted_events)

            result = await self._event_store.append_events(
                aggregate_id=aggregate.aggregate_id,
                aggregate_type=self._aggregate_type,
                events=uncommitted_events,
                expected_version=expected_version,
            )

            if result.success:
                aggregate.mark_events_as_committed()
                if self._event_publisher:
                    await self._event_publisher.publish(uncommitted_events)

    async def exists(self, aggregate_id: UUID) -> bool:
        stream = await self._event_store.get_events(
            aggregate_id,
            aggregate_type=self._aggregate_type,
        )
        return not stream.is_empty

    async def get_version(self, aggregate_id: UUID) -> int:
        """Get the current version of an aggregate (0 if it doesn't exist)."""
        return await self._event_store.get_stream_version(aggregate_id, self._aggregate_type)

    def create_new(self, aggregate_id: UUID) -> TAggregate:
        """Create a new, empty aggregate instance without persisting anything."""
        return self._aggregate_factory(aggregate_id)


__all__ = [
    "AggregateFactory",
    "AggregateRepository",
    "TAggregate",
]
