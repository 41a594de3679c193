"""
Base classes for event-sourced aggregates.

Aggregates are the consistency boundaries in event sourcing. They rebuild
their state by applying events and record new events when commands run.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Generic, Literal
from uuid import UUID

from eventbench.events.base import DomainEvent
from eventbench.exceptions import EventVersionError, UnhandledEventError
from eventbench.handlers.decorators import get_handled_message_type
from eventbench.types import TState

UnregisteredEventHandling = Literal["ignore", "warn", "error"]

logger = logging.getLogger(__name__)


class AggregateRoot(Generic[TState], ABC):
    """
    Base class for event-sourced aggregate roots.

    The aggregate uses a generic type parameter `TState` to define the shape
    of its internal state, which must be a Pydantic BaseModel.

    Subclasses must implement:
    - `_apply(event)`: Update state based on event type
    - `_get_initial_state()`: Return initial state for new aggregates

    Example:
        >>> class OrderAggregate(AggregateRoot[OrderState]):
        ...     aggregate_type = "Order"
        ...
        ...     def _get_initial_state(self) -> OrderState:
        ...         return OrderState(order_id=self.aggregate_id)
        ...
        ...     def _apply(self, event: DomainEvent) -> None:
        ...         if isinstance(event, OrderCreated):
        ...             self._state = OrderState(order_id=self.aggregate_id, status="created")
        ...
        ...     def create(self) -> None:
        ...         self._raise_event(
        ...             OrderCreated(
        ...                 aggregate_id=self.aggregate_id,
        ...                 aggregate_type=self.aggregate_type,
        ...                 aggregate_version=self.get_next_version(),
        ...             )
        ...         )

    Attributes:
        aggregate_type: String identifier for this aggregate type (subclasses should override)
        validate_versions: Raise EventVersionError for out-of-sequence new events
    """

    aggregate_type: str = "Unknown"

    # When False, version mismatches are logged as warnings but allowed
    validate_versions: bool = True

    def __init__(self, aggregate_id: UUID) -> None:
        self._aggregate_id = aggregate_id
        self._version = 0
        self._uncommitted_events: list[DomainEvent] = []
        self._state: TState | None = None

    @property
    def aggregate_id(self) -> UUID:
        return self._aggregate_id

    @property
    def version(self) -> int:
        """Get the current version (number of events applied)."""
        return self._version

    @property
    def state(self) -> TState | None:
        """
        Get the current state of the aggregate.

        Returns None for new aggregates that haven't had any events applied.
        """
        return self._state

    @property
    def uncommitted_events(self) -> list[DomainEvent]:
        """Get a copy of the events that haven't been persisted yet."""
        return self._uncommitted_events.copy()

    @property
    def has_uncommitted_events(self) -> bool:
        return len(self._uncommitted_events) > 0

    def apply_event(self, event: DomainEvent, is_new: bool = True) -> None:
        """
        Apply an event to the aggregate.

        Args:
            event: The domain event to apply
            is_new: Whether this is a new event (True) or replayed from history (False)

        Raises:
            EventVersionError: If version validation is enabled, is_new=True,
                              and the event version isn't current version + 1
        """
        if is_new:
            expected_version = self._version + 1
            if event.aggregate_version != expected_version:
                if self.validate_versions:
                    raise EventVersionError(
                        expected_version=expected_version,
                        actual_version=event.aggregate_version,
                        event_id=event.event_id,
                        aggregate_id=self._aggregate_id,
                    )
                logger.warning(
                    "Version mismatch (validation disabled): expected %d, got %d "
                    "for aggregate %s, event %s",
                    expected_version,
                    event.aggregate_version,
                    self._aggregate_id,
                    event.event_id,
                    extra={
                        "aggregate_id": str(self._aggregate_id),
                        "expected_version": expected_version,
                        "actual_version": event.aggregate_version,
                        "event_id": str(event.event_id),
                    },
                )

        self._version = event.aggregate_version
        if self._state is None:
            self._state = self._get_initial_state()
        self._apply(event)

        if is_new:
            self._uncommitted_events.append(event)

    @abstractmethod
    def _apply(self, event: DomainEvent) -> None:
        """Apply event to update aggregate state."""
        pass

    @abstractmethod
    def _get_initial_state(self) -> TState:
        """Get the initial state, used before the first event is applied."""
        pass

    def mark_events_as_committed(self) -> None:
        """Called by the repository after events have been persisted."""
        self._uncommitted_events.clear()

    def load_from_history(self, events: list[DomainEvent]) -> None:
        """
        Reconstitute aggregate state from event history.

        Events are applied with is_new=False so they aren't added to
        uncommitted events.
        """
        for event in events:
            self.apply_event(event, is_new=False)

    def get_next_version(self) -> int:
        return self._version + 1

    def _raise_event(self, event: DomainEvent) -> None:
        """Apply a new event recorded by a command method."""
        self.apply_event(event, is_new=True)

    def serialize_state(self) -> dict[str, Any]:
        """JSON-compatible dump of the current state ({} before the first event)."""
        if self._state is None:
            return {}
        return self._state.model_dump(mode="json")

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"id={self._aggregate_id}, "
            f"version={self._version}, "
            f"uncommitted={len(self._uncommitted_events)})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AggregateRoot):
            return NotImplemented
        return self._aggregate_id == other._aggregate_id

    def __hash__(self) -> int:
        return hash(self._aggregate_id)


class DeclarativeAggregate(AggregateRoot[TState], ABC):
    """
    Aggregate that uses @handles methods to apply events.

    Attributes:
        unregistered_event_handling: Behavior when an event has no handler:
            - "ignore": Silently ignore unhandled events (default)
            - "warn": Log a warning for unhandled events
            - "error": Raise UnhandledEventError for unhandled events

    Example:
        >>> class OrderAggregate(DeclarativeAggregate[OrderState]):
        ...     aggregate_type = "Order"
        ...
        ...     def _get_initial_state(self) -> OrderState:
        ...         return OrderState(order_id=self.aggregate_id)
        ...
        ...     @handles(OrderShipped)
        ...     def _on_order_shipped(self, event: OrderShipped) -> None:
        ...         self._state = self._state.model_copy(update={"status": "shipped"})
    """

    unregistered_event_handling: UnregisteredEventHandling = "ignore"

    _event_handlers: dict[type[DomainEvent], str] = {}

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        # Each subclass gets its own handler registry
        cls._event_handlers = {}
        for name in dir(cls):
            method = getattr(cls, name, None)
            event_type = get_handled_message_type(method) if method is not None else None
            if event_type is not None:
                cls._event_handlers[event_type] = name

    def _apply(self, event: DomainEvent) -> None:
        handler_name = self._event_handlers.get(type(event))
        if handler_name:
            getattr(self, handler_name)(event)
        else:
            self._handle_unregistered_event(event)

    def _handle_unregistered_event(self, event: DomainEvent) -> None:
        event_type = type(event)
        available_handlers = [et.__name__ for et in self._event_handlers]

        if self.unregistered_event_handling == "error":
            raise UnhandledEventError(
                event_type=event_type.__name__,
                event_id=event.event_id,
                handler_class=self.__class__.__name__,
                available_handlers=available_handlers,
            )
        elif self.unregistered_event_handling == "warn":
            logger.warning(
                "No handler registered for event type %s in %s. Available handlers: %s.",
                event_type.__name__,
                self.__class__.__name__,
                ", ".join(available_handlers) if available_handlers else "none",
                extra={
                    "event_type": event_type.__name__,
                    "event_id": str(event.event_id),
                    "handler_class": self.__class__.__name__,
                },
            )


__all__ = [
    "AggregateRoot",
    "DeclarativeAggregate",
    "TState",
    "UnregisteredEventHandling",
]
