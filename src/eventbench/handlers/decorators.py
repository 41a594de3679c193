"""
Message handler decorators.

The @handles decorator marks a method as the handler for one message type.
It is shared by every declarative component in eventbench:

- DeclarativeAggregate: sync methods applying events to aggregate state
- DeclarativeListener: event listeners subscribed to the event bus
- command and query handlers subscribed to the command and query buses

Example:
    >>> from eventbench.handlers import handles
"""

from collections.abc import Callable
from typing import Any, TypeVar

# Type variable for handler functions - preserves the exact type of the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handles(message_type: type) -> Callable[[F], F]:
    """
    Decorator to mark a method as the handler for a specific message type.

    The decorator attaches the message type to the function, which is then
    discovered by HandlerRegistry (and by DeclarativeAggregate for event
    application).

    Args:
        message_type: The DomainEvent, Command or Query subclass this handler processes

    Returns:
        A decorator function that marks the handler and preserves the original function

    Handler Signatures:
        Aggregates (sync):
            def handler(self, event: EventType) -> None

        Listeners (sync or async):
            async def handler(self, event: EventType) -> None

        Command and query handlers (sync or async, result returned to the caller):
            async def handler(self, command: CommandType) -> Any

    Example:
        >>> class PlaceOrderHandler:
        ...     @handles(PlaceOrder)
        ...     async def place(self, command: PlaceOrder) -> UUID:
        ...         ...
    """

    def decorator(func: F) -> F:
        func._handles_message_type = message_type  # type: ignore[attr-defined]
        return func

    return decorator


def get_handled_message_type(func: Callable[..., Any]) -> type | None:
    """
    Get the message type handled by a decorated function.

    Args:
        func: A function potentially decorated with @handles

    Returns:
        The message type if decorated with @handles, None otherwise
    """
    return getattr(func, "_handles_message_type", None)


def is_message_handler(func: Callable[..., Any]) -> bool:
    """Check if a function is decorated with @handles."""
    return hasattr(func, "_handles_message_type")


__all__ = [
    "handles",
    "get_handled_message_type",
    "is_message_handler",
]
