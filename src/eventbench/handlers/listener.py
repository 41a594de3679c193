"""
Declarative event listener base class.

A DeclarativeListener subscribes to the event bus with exactly the event
types it has @handles methods for, so handlers only ever see events they
declared.
"""

from typing import ClassVar

from eventbench.events.base import DomainEvent
from eventbench.handlers.registry import HandlerRegistry, UnregisteredMessageHandling
from eventbench.protocols import EventSubscriber


class DeclarativeListener(EventSubscriber):
    """
    Event listener routing events to its @handles methods.

    Example:
        >>> class OrderSummaryListener(DeclarativeListener):
        ...     def __init__(self, summaries: InMemoryReadModelRepository[OrderSummary]):
        ...         super().__init__()
        ...         self._summaries = summaries
        ...
        ...     @handles(OrderCreated)
        ...     async def on_created(self, event: OrderCreated) -> None:
        ...         await self._summaries.save(OrderSummary(id=event.aggregate_id))
        >>>
        >>> event_bus.subscribe_all(OrderSummaryListener(summaries))
    """

    unregistered_event_handling: ClassVar[UnregisteredMessageHandling] = "ignore"

    def __init__(self) -> None:
        self._registry = HandlerRegistry(
            self,
            unregistered_message_handling=self.unregistered_event_handling,
        )

    def subscribed_to(self) -> list[type[DomainEvent]]:
        return self._registry.get_handled_types()

    async def handle(self, event: DomainEvent) -> None:
        await self._registry.dispatch(event)


__all__ = ["DeclarativeListener"]
