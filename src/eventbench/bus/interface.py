"""Event bus interface definitions.

The event bus decouples event producers (repositories, test steps) from
consumers (listeners, spies, read model updaters). Besides publishing and
subscribing, every bus can report when it has gone idle, which is what the
test bench synchronizes its steps against.
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Sequence

from eventbench.events.base import DomainEvent
from eventbench.protocols import (
    FlexibleEventHandler,
    FlexibleEventSubscriber,
)

# Type alias for simple function-based handlers
EventHandlerFunc = Callable[[DomainEvent], Awaitable[None] | None]


class EventBus(ABC):
    """
    Abstract event bus for publishing and subscribing to domain events.

    Tracing Support:
        Implementations use the composition-based ``Tracer`` from
        ``eventbench.observability``:

        - ``eventbench.event_bus.dispatch`` - For dispatching one event to its handlers
        - ``eventbench.event_bus.handle`` - For individual handler invocations

    Example:
        >>> event_bus = InMemoryEventBus()
        >>> event_bus.subscribe_to(OrderCreated, order_handler)
        >>> event_bus.subscribe(audit_log)
        >>> await event_bus.publish([OrderCreated(...)])
        >>> await event_bus.until_idle()
    """

    @abstractmethod
    async def publish(self, events: Sequence[DomainEvent]) -> None:
        """
        Publish events to all registered subscribers.

        Events are dispatched in order; every handler for an event is
        invoked before the next event is dispatched.

        Args:
            events: Events to publish
        """
        pass

    @abstractmethod
    def subscribe(self, handler: FlexibleEventHandler | EventHandlerFunc) -> None:
        """
        Subscribe a handler to every published event (wildcard subscription).

        Args:
            handler: Object with handle() method or callable
        """
        pass

    @abstractmethod
    def subscribe_to(
        self,
        event_type: type[DomainEvent],
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> None:
        """
        Subscribe a handler to a specific event type.

        Multiple handlers can be subscribed to the same event type.

        Args:
            event_type: The event class to subscribe to
            handler: Object with handle() method or callable
        """
        pass

    @abstractmethod
    def subscribe_all(self, subscriber: FlexibleEventSubscriber) -> None:
        """
        Subscribe an EventSubscriber to all its declared event types.

        Args:
            subscriber: The subscriber to register
        """
        pass

    @abstractmethod
    def unsubscribe(self, handler: FlexibleEventHandler | EventHandlerFunc) -> bool:
        """
        Remove a handler from every subscription it holds.

        Returns:
            True if the handler was found and removed, False otherwise
        """
        pass

    @abstractmethod
    async def until_idle(self) -> None:
        """
        Wait until no dispatch is in progress.

        Handlers that publish further events while running are waited for
        too. Returns immediately when nothing is running.
        """
        pass


__all__ = [
    "EventBus",
    "EventHandlerFunc",
]
