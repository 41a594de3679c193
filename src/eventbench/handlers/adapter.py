"""
Handler adapter for normalizing event listeners.

Event bus subscribers come in several shapes (objects with a sync or async
``handle()`` method, plain functions, lambdas, coroutine functions). The
adapter turns all of them into a single async ``handle(event)`` so the buses
never need runtime type checks at dispatch time.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from eventbench.events.base import DomainEvent

logger = logging.getLogger(__name__)


# Type for async handler function
AsyncHandlerFunc = Callable[[DomainEvent], Awaitable[None]]


def get_handler_name(handler: Any) -> str:
    """
    Get a descriptive name for a handler for logging and debugging.

    Args:
        handler: Any handler object (class instance, function, lambda)

    Returns:
        String name for the handler
    """
    if hasattr(handler, "__class__") and handler.__class__.__name__ not in (
        "function",
        "method",
    ):
        return str(handler.__class__.__name__)
    elif hasattr(handler, "__qualname__"):
        return str(handler.__qualname__)
    elif hasattr(handler, "__name__"):
        return str(handler.__name__)
    else:
        return repr(handler)


class HandlerAdapter:
    """
    Adapter that normalizes event handlers to a consistent async interface.

    Accepts:
    - Objects with async handle() method
    - Objects with sync handle() method
    - Async callable functions
    - Sync callable functions

    Example:
        >>> def sync_handler(event: DomainEvent) -> None:
        ...     print(event)
        >>> adapter = HandlerAdapter(sync_handler)
        >>> await adapter.handle(event)

    Attributes:
        original: The original unwrapped handler
        name: Descriptive name for logging
    """

    def __init__(self, handler: Any) -> None:
        """
        Initialize the adapter with a handler.

        Raises:
            TypeError: If handler doesn't have handle() method and isn't callable
        """
        self._original = handler
        self._name = get_handler_name(handler)
        self._async_handler = self._normalize(handler)

    def _normalize(self, handler: Any) -> AsyncHandlerFunc:
        if hasattr(handler, "handle"):
            target = handler.handle
        elif callable(handler):
            target = handler
        else:
            raise TypeError(
                f"Handler must have a handle() method or be callable, got {type(handler)}"
            )

        if asyncio.iscoroutinefunction(target):
            return target  # type: ignore[no-any-return]

        async def async_wrapper(event: DomainEvent) -> None:
            result = target(event)
            # Sync callables may still hand back a coroutine (e.g. a lambda)
            if asyncio.iscoroutine(result):
                await result

        return async_wrapper

    @property
    def original(self) -> Any:
        """Get the original unwrapped handler."""
        return self._original

    @property
    def name(self) -> str:
        """Get the handler's descriptive name."""
        return self._name

    async def handle(self, event: DomainEvent) -> None:
        """Handle an event using the normalized async handler."""
        await self._async_handler(event)

    def __eq__(self, other: object) -> bool:
        """Check equality based on original handler identity."""
        if isinstance(other, HandlerAdapter):
            return self._original is other._original
        return self._original is other

    def __hash__(self) -> int:
        return id(self._original)

    def __repr__(self) -> str:
        return f"HandlerAdapter({self._name})"


__all__ = [
    "HandlerAdapter",
    "AsyncHandlerFunc",
    "get_handler_name",
]
