"""
Event store interface and core data structures.

The event store is the source of truth for aggregates: repositories append
the events an aggregate recorded and replay them to rebuild its state.

This module provides:
- EventStream: A container for events belonging to an aggregate
- AppendResult: Result of appending events to the store
- ExpectedVersion: Special expected-version values for optimistic locking
- EventStore: Abstract base class for event store implementations
- EventPublisher: Protocol for publishing events after they are stored
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol
from uuid import UUID

from eventbench.events.base import DomainEvent


@dataclass(frozen=True)
class EventStream:
    """
    Represents a stream of events for a single aggregate.

    Attributes:
        aggregate_id: Unique identifier of the aggregate
        aggregate_type: Type name of the aggregate (e.g., 'Order')
        events: List of events in chronological order (oldest first)
        version: Current version of the aggregate (number of events applied)

    Example:
        >>> stream = await event_store.get_events(order_id, "Order")
        >>> for event in stream.events:
        ...     aggregate.apply_event(event, is_new=False)
    """

    aggregate_id: UUID
    aggregate_type: str
    events: list[DomainEvent] = field(default_factory=list)
    version: int = 0

    @property
    def is_empty(self) -> bool:
        """Check if the stream has no events."""
        return len(self.events) == 0

    @property
    def latest_event(self) -> DomainEvent | None:
        """Get the most recent event, or None if stream is empty."""
        return self.events[-1] if self.events else None

    @classmethod
    def empty(cls, aggregate_id: UUID, aggregate_type: str) -> "EventStream":
        return cls(aggregate_id=aggregate_id, aggregate_type=aggregate_type)


@dataclass(frozen=True)
class AppendResult:
    """
    Result of appending events to the event store.

    Attributes:
        success: Whether the append was successful
        new_version: The version after appending (aggregate version)
        global_position: The global position of the last appended event
        conflict: Whether there was a version conflict (optimistic lock)
    """

    success: bool
    new_version: int
    global_position: int = 0
    conflict: bool = False

    @classmethod
    def successful(cls, new_version: int, global_position: int = 0) -> "AppendResult":
        return cls(success=True, new_version=new_version, global_position=global_position)

    @classmethod
    def conflicted(cls, current_version: int) -> "AppendResult":
        return cls(success=False, new_version=current_version, conflict=True)


class ExpectedVersion:
    """
    Constants for expected version in append operations.

    - ANY: Don't check version (disable optimistic locking)
    - NO_STREAM: Expect the stream to not exist (for creating new aggregates)
    - STREAM_EXISTS: Expect the stream to exist (for updating existing aggregates)
    """

    ANY: int = -1
    NO_STREAM: int = 0
    STREAM_EXISTS: int = -2


class EventStore(ABC):
    """
    Abstract base class for event stores.

    Implementations must handle:
    - Atomic event appending with optimistic locking
    - Event retrieval by aggregate ID
    - Idempotency checks via event_exists

    Example:
        >>> result = await event_store.append_events(
        ...     aggregate_id=order_id,
        ...     aggregate_type="Order",
        ...     events=[order_created_event],
        ...     expected_version=0,
        ... )
    """

    @abstractmethod
    async def append_events(
        self,
        aggregate_id: UUID,
        aggregate_type: str,
        events: Sequence[DomainEvent],
        expected_version: int,
    ) -> AppendResult:
        """
        Append events to an aggregate's event stream.

        Args:
            aggregate_id: ID of the aggregate
            aggregate_type: Type of aggregate (e.g., 'Order', 'User')
            events: Events to append
            expected_version: Expected current version (for optimistic locking).
                            Use 0 for new aggregates, or use ExpectedVersion constants.

        Returns:
            AppendResult with success status and new version

        Raises:
            OptimisticLockError: If expected_version doesn't match current version
        """
        pass

    @abstractmethod
    async def get_events(
        self,
        aggregate_id: UUID,
        aggregate_type: str | None = None,
        from_version: int = 0,
    ) -> EventStream:
        """
        Get the events of an aggregate, oldest first.

        Args:
            aggregate_id: ID of the aggregate
            aggregate_type: Type of aggregate (optional, filters by type if provided)
            from_version: Skip this many events (default: 0 = all events)
        """
        pass

    @abstractmethod
    async def get_events_by_type(self, aggregate_type: str) -> list[DomainEvent]:
        """Get every event of an aggregate type in the order it was stored."""
        pass

    @abstractmethod
    async def get_aggregate_ids(self, aggregate_type: str | None = None) -> list[UUID]:
        """Get the ids of every stored aggregate, in first-append order."""
        pass

    @abstractmethod
    async def event_exists(self, event_id: UUID) -> bool:
        pass

    async def get_stream_version(self, aggregate_id: UUID, aggregate_type: str) -> int:
        """Get the current version of an aggregate's stream (0 if it doesn't exist)."""
        stream = await self.get_events(aggregate_id, aggregate_type)
        return stream.version


class EventPublisher(Protocol):
    """
    Protocol for publishing events once they have been stored.

    The event buses satisfy this protocol; repositories publish through it.
    """

    async def publish(self, events: Sequence[DomainEvent]) -> None: ...


__all__ = [
    "AppendResult",
    "EventPublisher",
    "EventStore",
    "EventStream",
    "ExpectedVersion",
]
