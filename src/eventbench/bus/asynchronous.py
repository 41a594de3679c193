"""Asynchronous event bus used by the test bench.

Every publish is dispatched in a tracked background task, so the publisher
returns before any handler runs. Handler failures are handed to an
``on_error`` callback instead of only being logged, which lets the test
bench raise them at its next checkpoint.
"""

import logging
from collections.abc import Callable, Sequence

from eventbench.bus.memory import InMemoryEventBus
from eventbench.events.base import DomainEvent
from eventbench.handlers.adapter import HandlerAdapter
from eventbench.observability import Tracer

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Exception], None]


class AsynchronousEventBus(InMemoryEventBus):
    """
    In-memory event bus that always publishes in the background.

    Args:
        on_error: Called with each exception raised by a handler. When not
                  given, failures are logged like InMemoryEventBus does.
        tracer: Optional custom Tracer instance
        enable_tracing: If True and OpenTelemetry is available, emit traces

    Example:
        >>> errors: list[Exception] = []
        >>> bus = AsynchronousEventBus(on_error=errors.append)
        >>> bus.subscribe_to(OrderCreated, failing_handler)
        >>> await bus.publish([OrderCreated(...)])  # returns right away
        >>> await bus.until_idle()
        >>> errors
        [RuntimeError('boom')]
    """

    def __init__(
        self,
        *,
        on_error: ErrorCallback | None = None,
        tracer: Tracer | None = None,
        enable_tracing: bool = True,
    ) -> None:
        super().__init__(tracer=tracer, enable_tracing=enable_tracing)
        self._on_error = on_error

    async def publish(
        self,
        events: Sequence[DomainEvent],
        background: bool = True,
    ) -> None:
        await super().publish(events, background=background)

    def _on_handler_error(
        self,
        adapter: HandlerAdapter,
        event: DomainEvent,
        error: Exception,
    ) -> None:
        if self._on_error is None:
            super()._on_handler_error(adapter, event, error)
            return

        logger.debug(
            "Handler %s failed processing %s, reporting error",
            adapter.name,
            type(event).__name__,
            extra={
                "handler": adapter.name,
                "event_type": type(event).__name__,
                "event_id": str(event.event_id),
                "error": str(error),
            },
        )
        self._on_error(error)


__all__ = ["AsynchronousEventBus", "ErrorCallback"]
