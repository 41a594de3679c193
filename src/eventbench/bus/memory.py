"""In-memory event bus implementation.

Distributes domain events to handlers registered in the same process.
Handlers run with error isolation: one failing handler is logged and does
not prevent the other handlers of the same event from running.
"""

import asyncio
import logging
from collections import defaultdict
from collections.abc import Sequence

from eventbench.bus.interface import (
    EventBus,
    EventHandlerFunc,
)
from eventbench.events.base import DomainEvent
from eventbench.handlers.adapter import HandlerAdapter
from eventbench.observability import Tracer, create_tracer
from eventbench.observability.attributes import (
    ATTR_AGGREGATE_ID,
    ATTR_EVENT_ID,
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_NAME,
    ATTR_HANDLER_SUCCESS,
)
from eventbench.protocols import (
    FlexibleEventHandler,
    FlexibleEventSubscriber,
)

logger = logging.getLogger(__name__)


class InMemoryEventBus(EventBus):
    """
    In-memory event bus for event distribution.

    Supports both synchronous (blocking) and fire-and-forget publishing.
    Background publishes are tracked so ``until_idle()`` can wait for them.

    Features:
    - Support for sync and async handlers
    - Wildcard subscriptions (receive all events)
    - Error isolation (handler failures don't stop other handlers)
    - Optional OpenTelemetry tracing

    Example:
        >>> bus = InMemoryEventBus()
        >>> bus.subscribe_to(OrderCreated, my_handler)
        >>> await bus.publish([OrderCreated(...)])
    """

    def __init__(
        self,
        *,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        """
        Initialize the event bus with empty subscriber registry.

        Args:
            tracer: Optional custom Tracer instance. If not provided, one is
                   created based on enable_tracing setting.
            enable_tracing: If True and OpenTelemetry is available, emit traces.
                          Ignored if tracer is explicitly provided.
        """
        self._subscribers: dict[type[DomainEvent], list[HandlerAdapter]] = defaultdict(list)
        self._all_event_handlers: list[HandlerAdapter] = []
        self._background_tasks: set[asyncio.Task[None]] = set()
        self._stats = {
            "events_published": 0,
            "handlers_invoked": 0,
            "handler_errors": 0,
            "background_tasks_created": 0,
            "background_tasks_completed": 0,
        }

        self._tracer = tracer or create_tracer(__name__, enable_tracing)
        self._enable_tracing = self._tracer.enabled

    async def publish(
        self,
        events: Sequence[DomainEvent],
        background: bool = False,
    ) -> None:
        """
        Publish events to all registered subscribers.

        Args:
            events: Events to publish
            background: If True, dispatch in a tracked background task and
                        return immediately
        """
        if not events:
            return

        events = list(events)
        if background:
            task = asyncio.create_task(self._publish_all(events))
            task.add_done_callback(self._on_background_task_done)
            self._background_tasks.add(task)
            self._stats["background_tasks_created"] += 1
            logger.debug(
                "Scheduled background publishing of %d event(s)",
                len(events),
                extra={"event_count": len(events)},
            )
        else:
            await self._publish_all(events)

    def _on_background_task_done(self, task: asyncio.Task[None]) -> None:
        self._background_tasks.discard(task)
        self._stats["background_tasks_completed"] += 1

        if not task.cancelled():
            exc = task.exception()
            if exc:
                logger.error(
                    "Background publishing task failed: %s",
                    exc,
                    exc_info=exc,
                )

    async def until_idle(self) -> None:
        """Wait for every background publish, including ones started meanwhile."""
        while True:
            pending = [task for task in self._background_tasks if not task.done()]
            if not pending:
                return
            await asyncio.wait(pending)

    async def _publish_all(self, events: list[DomainEvent]) -> None:
        for event in events:
            await self._dispatch_event(event)
            self._stats["events_published"] += 1

    async def _dispatch_event(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = list(self._subscribers.get(event_type, [])) + list(self._all_event_handlers)

        if not handlers:
            logger.debug(
                "No handlers registered for event type: %s",
                event_type.__name__,
                extra={"event_type": event_type.__name__},
            )
            return

        logger.debug(
            "Dispatching %s to %d handler(s)",
            event_type.__name__,
            len(handlers),
            extra={
                "event_type": event_type.__name__,
                "event_id": str(event.event_id),
                "aggregate_id": str(event.aggregate_id),
                "handler_count": len(handlers),
            },
        )

        with self._tracer.span(
            "eventbench.event_bus.dispatch",
            {
                ATTR_EVENT_TYPE: event_type.__name__,
                ATTR_EVENT_ID: str(event.event_id),
                ATTR_AGGREGATE_ID: str(event.aggregate_id),
                ATTR_HANDLER_COUNT: len(handlers),
            },
        ):
            await asyncio.gather(*(self._safe_handle(adapter, event) for adapter in handlers))

    async def _safe_handle(self, adapter: HandlerAdapter, event: DomainEvent) -> None:
        with self._tracer.span(
            "eventbench.event_bus.handle",
            {
                ATTR_EVENT_TYPE: type(event).__name__,
                ATTR_EVENT_ID: str(event.event_id),
                ATTR_AGGREGATE_ID: str(event.aggregate_id),
                ATTR_HANDLER_NAME: adapter.name,
            },
        ) as span:
            try:
                await adapter.handle(event)
            except Exception as e:
                if span:
                    span.set_attribute(ATTR_HANDLER_SUCCESS, False)
                    span.record_exception(e)
                self._stats["handler_errors"] += 1
                self._on_handler_error(adapter, event, e)
            else:
                if span:
                    span.set_attribute(ATTR_HANDLER_SUCCESS, True)
                self._stats["handlers_invoked"] += 1
                logger.debug(
                    "Handler %s processed %s",
                    adapter.name,
                    type(event).__name__,
                    extra={
                        "handler": adapter.name,
                        "event_type": type(event).__name__,
                        "event_id": str(event.event_id),
                    },
                )

    def _on_handler_error(
        self,
        adapter: HandlerAdapter,
        event: DomainEvent,
        error: Exception,
    ) -> None:
        """Called for every handler failure; this bus logs and moves on."""
        logger.error(
            "Handler %s failed processing %s: %s",
            adapter.name,
            type(event).__name__,
            error,
            exc_info=error,
            extra={
                "handler": adapter.name,
                "event_type": type(event).__name__,
                "event_id": str(event.event_id),
                "error": str(error),
            },
        )

    def subscribe(self, handler: FlexibleEventHandler | EventHandlerFunc) -> None:
        adapter = HandlerAdapter(handler)
        self._all_event_handlers.append(adapter)

        logger.debug(
            "Registered wildcard handler %s",
            adapter.name,
            extra={"handler": adapter.name},
        )

    def subscribe_to(
        self,
        event_type: type[DomainEvent],
        handler: FlexibleEventHandler | EventHandlerFunc,
    ) -> None:
        adapter = HandlerAdapter(handler)
        self._subscribers[event_type].append(adapter)

        logger.debug(
            "Registered handler %s for %s",
            adapter.name,
            event_type.__name__,
            extra={
                "handler": adapter.name,
                "event_type": event_type.__name__,
            },
        )

    def subscribe_all(self, subscriber: FlexibleEventSubscriber) -> None:
        for event_type in subscriber.subscribed_to():
            self.subscribe_to(event_type, subscriber)

    def unsubscribe(self, handler: FlexibleEventHandler | EventHandlerFunc) -> bool:
        # HandlerAdapter compares on the identity of the wrapped handler
        target = HandlerAdapter(handler)
        removed = False

        for event_type, adapters in self._subscribers.items():
            if target in adapters:
                self._subscribers[event_type] = [a for a in adapters if a != target]
                removed = True

        if target in self._all_event_handlers:
            self._all_event_handlers = [a for a in self._all_event_handlers if a != target]
            removed = True

        if removed:
            logger.debug("Unsubscribed handler %s", target.name, extra={"handler": target.name})
        return removed

    def clear_subscribers(self) -> None:
        """Remove every subscription."""
        self._subscribers.clear()
        self._all_event_handlers.clear()

    def get_subscriber_count(self, event_type: type[DomainEvent] | None = None) -> int:
        """
        Get the number of registered type-specific subscribers.

        Args:
            event_type: If provided, count subscribers for this event type only.
                       Wildcard subscribers are never included.
        """
        if event_type is None:
            return sum(len(handlers) for handlers in self._subscribers.values())
        return len(self._subscribers.get(event_type, []))

    def get_wildcard_subscriber_count(self) -> int:
        return len(self._all_event_handlers)

    def get_stats(self) -> dict[str, int]:
        """
        Get statistics about event bus operation.

        Returns:
            Dictionary with counts:
            - events_published: Total events published
            - handlers_invoked: Total successful handler invocations
            - handler_errors: Total handler errors
            - background_tasks_created: Background tasks started
            - background_tasks_completed: Background tasks finished
        """
        return dict(self._stats)

    def get_background_task_count(self) -> int:
        return len(self._background_tasks)


__all__ = ["InMemoryEventBus"]
