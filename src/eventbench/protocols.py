"""
Canonical protocol definitions for the eventbench library.

Protocols:
- EventHandler: Async handler for domain events
- SyncEventHandler: Sync handler for domain events
- FlexibleEventHandler: Handler that may be sync or async
- EventSubscriber: Handler that declares event subscriptions (ABC-based)
- FlexibleEventSubscriber: Protocol version of EventSubscriber
"""

from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Protocol, runtime_checkable

from eventbench.events.base import DomainEvent


@runtime_checkable
class EventHandler(Protocol):
    """
    Protocol for async event handlers.

    Example:
        >>> class MyHandler:
        ...     async def handle(self, event: DomainEvent) -> None:
        ...         await self.process(event)
    """

    async def handle(self, event: DomainEvent) -> None: ...


@runtime_checkable
class SyncEventHandler(Protocol):
    """Protocol for synchronous event handlers (in-memory updates, spies)."""

    def handle(self, event: DomainEvent) -> None: ...


@runtime_checkable
class FlexibleEventHandler(Protocol):
    """
    Protocol for handlers that may be sync or async.

    Used by the event buses, which accept both and normalize them with
    HandlerAdapter.
    """

    def handle(self, event: DomainEvent) -> Awaitable[None] | None:
        """Handle event, returning Awaitable if async."""
        ...


class EventSubscriber(ABC):
    """
    Abstract base class for event subscribers.

    Subscribers declare which event types they handle and provide a handler
    method. Listeners registered on the test bench are usually subscribers.

    Example:
        >>> class OrderListener(EventSubscriber):
        ...     def subscribed_to(self) -> list[type[DomainEvent]]:
        ...         return [OrderCreated, OrderShipped]
        ...
        ...     async def handle(self, event: DomainEvent) -> None:
        ...         ...
    """

    @abstractmethod
    def subscribed_to(self) -> list[type[DomainEvent]]:
        """Return list of event types this subscriber handles."""
        pass

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Handle a domain event."""
        pass


@runtime_checkable
class FlexibleEventSubscriber(Protocol):
    """Protocol version of EventSubscriber accepting sync or async handle()."""

    def subscribed_to(self) -> list[type[DomainEvent]]: ...

    def handle(self, event: DomainEvent) -> Awaitable[None] | None: ...


__all__ = [
    "EventHandler",
    "SyncEventHandler",
    "FlexibleEventHandler",
    "EventSubscriber",
    "FlexibleEventSubscriber",
]
