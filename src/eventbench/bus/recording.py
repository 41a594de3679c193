"""Event bus decorator that records every published event."""

from collections.abc import Sequence

from eventbench.bus.interface import EventBus, EventHandlerFunc
from eventbench.events.base import DomainEvent
from eventbench.protocols import FlexibleEventHandler, FlexibleEventSubscriber


class RecordingEventBus(EventBus):
    """
    Wraps another bus and keeps every published event, in publish order.

    Subscriptions and idle tracking are delegated to the wrapped bus.

    Example:
        >>> bus = RecordingEventBus(AsynchronousEventBus())
        >>> await bus.publish([order_created])
        >>> bus.recorded_events
        [OrderCreated(...)]
    """

    def __init__(self, inner: EventBus) -> None:
        self._inner = inner
        self._recorded: list[DomainEvent] = []

    @property
    def inner(self) -> EventBus:
        return self._inner

    @property
    def recorded_events(self) -> list[DomainEvent]:
        """Copy of the events published so far."""
        return list(self._recorded)

    def clear(self) -> None:
        self._recorded.clear()

    async def publish(self, events: Sequence[DomainEvent]) -> None:
        self._recorded.extend(events)
        await self._inner.publish(events)

    def subscribe(self, handler: FlexibleEventHandler | EventHandlerFunc) -> None:
        self._inner.subscribe(handler)

    def subscribe_to(
        self,
        event_type: type[DomainEvent],
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> None:
        self._inner.subscribe_to(event_type, handler)

    def subscribe_all(self, subscriber: FlexibleEventSubscriber) -> None:
        self._inner.subscribe_all(subscriber)

    def unsubscribe(self, handler: FlexibleEventHandler | EventHandlerFunc) -> bool:
        return self._inner.unsubscribe(handler)

    async def until_idle(self) -> None:
        await self._inner.until_idle()


__all__ = ["RecordingEventBus"]
